# imagegen_dashboard/demo/seed_demo_data.py

from datetime import datetime, timedelta, timezone

from imagegen_dashboard.storage.models import ImageRecord, UserRecord, format_timestamp
from imagegen_dashboard.storage.repository import RecordRepository, initialize_schema

initialize_schema()
repository = RecordRepository()

now = datetime.now(timezone.utc)

users = [
    UserRecord(
        id="user_ada",
        email="ada@example.com",
        display_name="Ada",
        role="admin",
        created_at=format_timestamp(now - timedelta(days=75))
    ),
    UserRecord(
        id="user_grace",
        email="grace@example.com",
        display_name="Grace",
        created_at=format_timestamp(now - timedelta(days=20))
    ),
    UserRecord(
        id="user_linus",
        email="linus@example.com",
        created_at=format_timestamp(now - timedelta(days=2))
    )
]

prompts = [
    "A lighthouse on a cliff at sunset, oil painting",
    "A lighthouse on a cliff at sunset, oil painting",
    "Isometric pixel art of a cozy coffee shop",
    "Portrait of a red fox wearing a knitted scarf, studio lighting, highly detailed",
    "A lighthouse on a cliff at sunset, oil painting",
]

for u in users:
    repository.insert_user(u)

for i, prompt in enumerate(prompts):
    owner = users[i % len(users)]
    repository.insert_image(ImageRecord(
        id=f"img_demo_{i}",
        user_id=owner.id,
        url=f"https://images.example.com/demo/{i}.png",
        prompt=prompt,
        size="1024x1024",
        quality="high",
        created_at=format_timestamp(now - timedelta(days=i * 3, hours=i))
    ))

print("Demo users and images inserted")
