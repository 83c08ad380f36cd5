"""
Guarded image generation client.

Submits generation requests to the OpenAI Images API and records every
successful result in the record store.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

from openai import OpenAI

from ..config.loader import DashboardSettings, default_settings
from ..storage.db import DEFAULT_DB_PATH
from ..storage.models import (
    ImageQuality,
    ImageRecord,
    ImageSize,
    ImageStyle,
    format_timestamp,
)
from ..storage.repository import RecordRepository

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_MODEL = "dall-e-3"

# dall-e-3 only takes "standard" or "hd" as quality
API_QUALITY = {ImageQuality.HIGH.value: "hd"}
DEFAULT_API_QUALITY = "standard"


class GenerationError(Exception):
    """Raised when a generation request is refused or yields no image."""


class GuardedImageGenerator:
    """Image generation wrapper that records generated images.

    Enforces the site's maintenance mode and per-user image quota before
    calling the API. All failures are loud to ensure no silent data loss.
    """

    def __init__(
        self,
        user_id: str,
        settings: Optional[DashboardSettings] = None,
        db_path: Optional[str] = None,
        model: str = DEFAULT_IMAGE_MODEL,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize guarded image generator.

        Args:
            user_id: Owner of the generated images (required)
            settings: Dashboard settings (defaults when omitted)
            db_path: Database file path (defaults to the store's default)
            model: Image model name
            clock: Callable returning the current time, for record timestamps

        Raises:
            ValueError: If user_id is missing/empty
        """
        if not user_id or not user_id.strip():
            raise ValueError("user_id is required and cannot be empty")

        self.user_id = user_id
        self.settings = settings or default_settings()
        self.db_path = db_path or DEFAULT_DB_PATH
        self.model = model
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self.repository = RecordRepository(self.db_path)
        self.client = OpenAI()

    def generate(
        self,
        prompt: str,
        size: str = ImageSize.SQUARE.value,
        quality: str = ImageQuality.HIGH.value,
        style: str = ImageStyle.NATURAL.value
    ) -> ImageRecord:
        """Generate one image and store its record.

        Args:
            prompt: Text description of the image (required)
            size: One of the ImageSize values
            quality: One of the ImageQuality values
            style: One of the ImageStyle values

        Returns:
            The stored ImageRecord

        Raises:
            ValueError: If prompt is blank or an option is unknown
            GenerationError: If generation is refused or returns no image
            OpenAI API errors: Propagated without modification
            RecordStoreError: If the record cannot be stored
        """
        if not prompt or not prompt.strip():
            raise ValueError("prompt is required and cannot be empty")
        _require_member(ImageSize, size, "size")
        _require_member(ImageQuality, quality, "quality")
        _require_member(ImageStyle, style, "style")

        if self.settings.features.maintenance_mode:
            raise GenerationError("Image generation is disabled during maintenance")

        quota = self.settings.limits.max_images_per_user
        if self.repository.count_images_for_user(self.user_id) >= quota:
            raise GenerationError(
                f"User {self.user_id} reached the limit of {quota} images"
            )

        # Any API failure here stops execution before anything is stored
        response = self.client.images.generate(
            model=self.model,
            prompt=prompt,
            size=size,
            quality=API_QUALITY.get(quality, DEFAULT_API_QUALITY),
            style=style,
            n=1
        )

        data = getattr(response, "data", None) or []
        url = getattr(data[0], "url", None) if data else None
        if not url:
            raise GenerationError("No image data received")

        record = ImageRecord(
            id=f"img_{uuid.uuid4().hex}",
            user_id=self.user_id,
            url=url,
            prompt=prompt,
            size=size,
            quality=quality,
            created_at=format_timestamp(self.clock())
        )
        self.repository.insert_image(record)
        logger.info("Generated image %s for user %s", record.id, self.user_id)
        return record


def _require_member(enum_type, value: str, name: str) -> None:
    try:
        enum_type(value)
    except ValueError:
        valid = [member.value for member in enum_type]
        raise ValueError(f"{name} must be one of: {valid}")
