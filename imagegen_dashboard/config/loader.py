"""
Configuration management and loading.

Loads the dashboard settings once at startup from a YAML file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from imagegen_dashboard.core.filters import parse_time_range


@dataclass(frozen=True)
class SiteConfig:
    """Site identity shown on the dashboard."""
    name: str = "AI Image Generator"
    description: str = "Generate stunning AI-powered images with ease"

    def __post_init__(self):
        """Validate the site name is present."""
        if not self.name.strip():
            raise ValueError("site name cannot be empty")


@dataclass(frozen=True)
class LimitsConfig:
    """Usage limits."""
    max_images_per_user: int = 100
    api_rate_limit: int = 60  # requests per minute
    storage_limit: int = 1000  # megabytes

    def __post_init__(self):
        """Validate limits are positive."""
        if self.max_images_per_user <= 0:
            raise ValueError("max_images_per_user must be > 0")
        if self.api_rate_limit <= 0:
            raise ValueError("api_rate_limit must be > 0")
        if self.storage_limit <= 0:
            raise ValueError("storage_limit must be > 0")


@dataclass(frozen=True)
class FeatureFlags:
    """Site-wide toggles."""
    enable_registration: bool = True
    enable_notifications: bool = True
    maintenance_mode: bool = False


@dataclass(frozen=True)
class AnalyticsConfig:
    """Parameters of the analytics and gallery views."""
    page_size: int = 1000
    gallery_page_size: int = 50
    default_range: str = "30d"
    top_prompts_limit: int = 10
    prompt_truncate_length: int = 50
    growth_months: int = 6

    def __post_init__(self):
        """Validate view parameters."""
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")
        if self.gallery_page_size <= 0:
            raise ValueError("gallery_page_size must be > 0")
        if self.top_prompts_limit <= 0:
            raise ValueError("top_prompts_limit must be > 0")
        if self.prompt_truncate_length <= 0:
            raise ValueError("prompt_truncate_length must be > 0")
        if self.growth_months <= 0:
            raise ValueError("growth_months must be > 0")
        parse_time_range(self.default_range)

    @property
    def default_window_days(self) -> int:
        """Day count of the default time range."""
        return parse_time_range(self.default_range)


@dataclass(frozen=True)
class DashboardSettings:
    """Complete dashboard configuration."""
    site: SiteConfig = field(default_factory=SiteConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    features: FeatureFlags = field(default_factory=FeatureFlags)
    analytics: AnalyticsConfig = field(default_factory=AnalyticsConfig)


def default_settings() -> DashboardSettings:
    """Settings used when no configuration file is given."""
    return DashboardSettings()


_SECTION_TYPES = {
    'site': SiteConfig,
    'limits': LimitsConfig,
    'features': FeatureFlags,
    'analytics': AnalyticsConfig,
}

_FIELD_TYPES: Dict[str, Dict[str, type]] = {
    'site': {'name': str, 'description': str},
    'limits': {'max_images_per_user': int, 'api_rate_limit': int, 'storage_limit': int},
    'features': {'enable_registration': bool, 'enable_notifications': bool, 'maintenance_mode': bool},
    'analytics': {
        'page_size': int,
        'gallery_page_size': int,
        'default_range': str,
        'top_prompts_limit': int,
        'prompt_truncate_length': int,
        'growth_months': int,
    },
}


def load_settings(path: Optional[str] = None) -> DashboardSettings:
    """Load settings from a YAML file, or the defaults when no path is given.

    Args:
        path: Optional path to YAML configuration file

    Returns:
        Validated DashboardSettings object
    """
    if path is None:
        return default_settings()
    return load_dashboard_config(path)


def load_dashboard_config(path: str) -> DashboardSettings:
    """Load and validate dashboard configuration from YAML file.

    Every section is optional and omitted keys keep their defaults, but
    unknown sections or keys and values of the wrong type are rejected.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated DashboardSettings object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Dashboard config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    unknown_keys = set(raw_config.keys()) - set(_SECTION_TYPES)
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    sections = {}
    for section_name, section_type in _SECTION_TYPES.items():
        section_data = raw_config.get(section_name, {})
        if section_data is None:
            section_data = {}
        if not isinstance(section_data, dict):
            raise ValueError(f"'{section_name}' must be a dictionary")
        values = _parse_section(section_data, section_name)
        sections[section_name] = section_type(**values)

    return DashboardSettings(**sections)


def _parse_section(data: Dict[str, Any], section: str) -> Dict[str, Any]:
    """Check the keys and value types of one configuration section.

    Args:
        data: Section data from YAML
        section: Section name for error messages

    Returns:
        Keyword arguments for the section dataclass

    Raises:
        ValueError: If a key is unknown or a value has the wrong type
    """
    expected = _FIELD_TYPES[section]
    unknown_keys = set(data.keys()) - set(expected)
    if unknown_keys:
        raise ValueError(f"Unknown keys in {section}: {unknown_keys}")

    values = {}
    for key, value in data.items():
        expected_type = expected[key]
        # bool is a subclass of int, so it must be excluded explicitly
        if expected_type is int and isinstance(value, bool):
            raise ValueError(f"'{key}' in {section} must be an integer")
        if not isinstance(value, expected_type):
            raise ValueError(f"'{key}' in {section} must be of type {expected_type.__name__}")
        values[key] = value
    return values
