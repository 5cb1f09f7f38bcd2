#!/usr/bin/env python3
"""Seed a development database with sample posts.

Creates:
- All tables (when the database is empty and migrations were not run)
- A handful of posts across every post type, with tags and votes

The script is idempotent: posts are matched on content URL and skipped
when already present.

Usage:
    cd services/api
    python -m scripts.seed
"""

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import select

from sharenow.models import Post
from sharenow.services.post_types import PostTypeId
from sharenow.stores.postgres import close_db, create_tables, get_session, init_db

load_dotenv()

SEED_AUTHOR_ID = "00000000-0000-0000-0000-000000000001"
SEED_AUTHOR_NAME = "Share Now Demo"

SAMPLE_POSTS = [
    {
        "type": PostTypeId.BLOG_POST,
        "title": "Designing APIs people enjoy using",
        "description": (
            "A practical walk through naming, pagination, error formats and versioning for HTTP APIs, "
            "with examples of what worked and what had to be rolled back after the first release."
        ),
        "content_url": "https://example.com/blog/designing-apis",
        "tags": "api;design",
        "total_votes": 12,
        "age_days": 2,
    },
    {
        "type": PostTypeId.PODCAST,
        "title": "Shipping on Fridays",
        "description": (
            "An episode about release trains, feature flags and on-call rotations, and why a team that "
            "trusts its deployment pipeline can ship any day of the week without drama or late nights."
        ),
        "content_url": "https://example.com/podcasts/shipping-on-fridays",
        "tags": "devops;release",
        "total_votes": 5,
        "age_days": 6,
    },
    {
        "type": PostTypeId.VIDEO,
        "title": "Intro to PostgreSQL indexes",
        "description": (
            "A short video covering B-tree, GIN and partial indexes, how the planner picks between them "
            "and how to read EXPLAIN output when a query that used to be fast suddenly is not."
        ),
        "content_url": "https://example.com/videos/postgres-indexes",
        "tags": "database;postgres",
        "total_votes": 21,
        "age_days": 10,
    },
    {
        "type": PostTypeId.BOOK,
        "title": "Team Topologies",
        "description": (
            "A book about organizing business and technology teams for fast flow, with patterns for "
            "stream-aligned, platform and enabling teams and the interaction modes between them."
        ),
        "content_url": "https://example.com/books/team-topologies",
        "tags": "teams;design",
        "total_votes": 8,
        "age_days": 20,
    },
    {
        "type": PostTypeId.OTHER,
        "title": "Accessibility checklist for web apps",
        "description": (
            "A checklist of keyboard navigation, contrast, focus management and screen reader checks "
            "to run before every release, grouped by component so it can be split across reviewers."
        ),
        "content_url": "https://example.com/other/a11y-checklist",
        "tags": "accessibility",
        "total_votes": 3,
        "age_days": 35,
    },
]


async def seed() -> None:
    await init_db()
    await create_tables()

    now = datetime.now(timezone.utc)
    created = 0
    async with get_session() as session:
        for sample in SAMPLE_POSTS:
            existing = await session.execute(
                select(Post.id).where(Post.content_url == sample["content_url"])
            )
            if existing.scalar_one_or_none() is not None:
                continue

            timestamp = now - timedelta(days=sample["age_days"])
            session.add(
                Post(
                    user_id=SEED_AUTHOR_ID,
                    created_by_name=SEED_AUTHOR_NAME,
                    type=int(sample["type"]),
                    title=sample["title"],
                    description=sample["description"],
                    content_url=sample["content_url"],
                    tags=sample["tags"],
                    total_votes=sample["total_votes"],
                    created_date=timestamp,
                    updated_date=timestamp,
                )
            )
            created += 1

    print(f"Seeded {created} posts ({len(SAMPLE_POSTS) - created} already present)")
    await close_db()


if __name__ == "__main__":
    asyncio.run(seed())
