#!/usr/bin/env python3
"""
Seed script: creates users and items directly in the database, scattered around a few cities
so geo searches have something to find. Run reindex_elasticsearch.py afterwards for the ES backend.
  python scripts/seed_data.py
  python scripts/seed_data.py --users 50 --items-per-user 20
"""

import argparse
import asyncio
import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Project root
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.db.base import Base
from app.db.models import Item, ItemCategory, ItemCondition, ModerationStatus, User
from app.db.session import async_session_maker, engine

# (name, lat, lng)
CITIES = [
    ("Madrid, Spain", 40.4168, -3.7038),
    ("Barcelona, Spain", 41.3874, 2.1686),
    ("Valencia, Spain", 39.4699, -0.3763),
    ("Sevilla, Spain", 37.3891, -5.9845),
    ("Bilbao, Spain", 43.2630, -2.9350),
]

TITLES = {
    ItemCategory.BOOKS: ["Python programming book", "Cookbook", "Vintage novel", "Travel guide", "Children's atlas"],
    ItemCategory.ELECTRONICS: ["Bluetooth headphones", "27 inch monitor", "Mechanical keyboard", "Webcam HD", "Power bank"],
    ItemCategory.CLOTHING: ["Winter coat", "Running shoes", "Wool scarf", "Denim jacket", "Rain boots"],
    ItemCategory.FURNITURE: ["Oak bookshelf", "Desk chair", "Coffee table", "Bedside lamp", "Kitchen stool"],
    ItemCategory.OTHER: ["Coffee maker", "Yoga mat", "Board game", "Plant pot", "Camping tent"],
}

DESCRIPTIONS = [
    "Barely used, works perfectly.",
    "Some signs of wear but fully functional.",
    "Free to a good home, pick up only.",
    "Great for students and home office.",
    "Moving out, must go this week.",
]


def random_item(owner: User, now: datetime) -> Item:
    category = random.choice(list(ItemCategory))
    city, lat, lng = random.choice(CITIES)
    located = random.random() > 0.2
    return Item(
        title=random.choice(TITLES[category]),
        description=random.choice(DESCRIPTIONS),
        category=category.value,
        condition=random.choice(list(ItemCondition)).value,
        location=city,
        # Up to ~15 km from the city centre
        latitude=lat + random.uniform(-0.1, 0.1) if located else None,
        longitude=lng + random.uniform(-0.1, 0.1) if located else None,
        coordinates_enabled=located,
        available=random.random() > 0.1,
        moderation_status=random.choice(list(ModerationStatus)).value,
        owner=owner,
        created_at=now - timedelta(minutes=random.randint(0, 60 * 24 * 90)),
    )


async def seed(users: int, items_per_user: int) -> int:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    now = datetime.now(timezone.utc)
    created = 0
    async with async_session_maker() as session:
        for i in range(users):
            owner = User(email=f"user{i+1}@example.com", full_name=f"User {i+1}")
            session.add(owner)
            for _ in range(items_per_user):
                session.add(random_item(owner, now))
                created += 1
            if (i + 1) % 10 == 0:
                await session.flush()
                print(f"  ... {i+1} users")
        await session.commit()
    await engine.dispose()
    return created


def main():
    ap = argparse.ArgumentParser(description="Seed users and items into the database")
    ap.add_argument("--users", type=int, default=30, help="Number of users to create")
    ap.add_argument("--items-per-user", type=int, default=25, help="Items per user")
    args = ap.parse_args()

    created = asyncio.run(seed(args.users, args.items_per_user))
    print(f"Created {args.users} users and {created} items.")
    print("Next: python scripts/reindex_elasticsearch.py --now")


if __name__ == "__main__":
    main()
