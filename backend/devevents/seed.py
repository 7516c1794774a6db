"""
Starter catalogue of tech events.

Entries go through the same validated write path as API requests, so slugs
are derived (not copied) and re-running the seed skips events whose title
already produced a stored slug.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from devevents.core.logging import get_logger
from devevents.models.event import Event
from devevents.schemas.event import EventCreate
from devevents.services.event_service import create_event
from devevents.services.validators import derive_base_slug, slug_taken, validate_fields

logger = get_logger(__name__)


def _conference(
    title: str,
    image: str,
    location: str,
    date: str,
    time: str,
    *,
    venue: str,
    mode: str = "offline",
    tags: list[str],
    organizer: str,
    audience: str = "Developers, engineers and tech leads",
) -> dict[str, Any]:
    return {
        "title": title,
        "image": image,
        "location": location,
        "date": date,
        "time": time,
        "venue": venue,
        "mode": mode,
        "tags": tags,
        "organizer": organizer,
        "audience": audience,
        "description": f"{title} brings the community together for talks, workshops and networking.",
        "overview": f"Join {title} in {location} for keynotes, deep dives and hallway conversations.",
        "agenda": ["Registration and welcome", "Keynote", "Breakout sessions", "Closing remarks"],
    }


CATALOGUE: list[dict[str, Any]] = [
    _conference(
        "React Conf 2025",
        "https://images.unsplash.com/photo-1505373877841-8d25f7d46678?w=800&q=80",
        "Henderson, Nevada, USA", "May 15-16, 2025", "9:00 AM - 6:00 PM PST",
        venue="Westin Lake Las Vegas", mode="hybrid", tags=["react", "javascript", "frontend"],
        organizer="Meta Open Source",
    ),
    _conference(
        "Google I/O 2025",
        "https://images.unsplash.com/photo-1475721027785-f74eccf877e2?w=800&q=80",
        "Mountain View, California, USA", "May 13-15, 2025", "10:00 AM - 5:00 PM PDT",
        venue="Shoreline Amphitheatre", mode="hybrid", tags=["google", "android", "ai", "web"],
        organizer="Google",
    ),
    _conference(
        "GitHub Universe 2024",
        "https://images.unsplash.com/photo-1511578314322-379afb476865?w=800&q=80",
        "San Francisco, California, USA", "October 29-30, 2024", "9:00 AM - 7:00 PM PDT",
        venue="Fort Mason Center", mode="hybrid", tags=["github", "devops", "open-source"],
        organizer="GitHub",
    ),
    _conference(
        "AWS re:Invent 2024",
        "https://images.unsplash.com/photo-1540575467063-178a50c2df87?w=800&q=80",
        "Las Vegas, Nevada, USA", "December 2-6, 2024", "8:00 AM - 8:00 PM PST",
        venue="The Venetian", tags=["aws", "cloud", "serverless"],
        organizer="Amazon Web Services",
    ),
    _conference(
        "HackMIT 2024",
        "https://images.unsplash.com/photo-1591115765373-5207764f72e7?w=800&q=80",
        "MIT Campus, Cambridge, MA, USA", "November 16-17, 2024", "12:00 PM - 12:00 PM EST",
        venue="Johnson Athletic Center", tags=["hackathon", "students"],
        organizer="HackMIT", audience="Student hackers and mentors",
    ),
    _conference(
        "KubeCon + CloudNativeCon Europe 2025",
        "https://images.unsplash.com/photo-1587825140708-dfaf72ae4b04?w=800&q=80",
        "London, United Kingdom", "April 1-4, 2025", "9:00 AM - 6:00 PM BST",
        venue="ExCeL London", tags=["kubernetes", "cloud-native", "devops"],
        organizer="Cloud Native Computing Foundation",
    ),
    _conference(
        "PyCon US 2025",
        "https://images.unsplash.com/photo-1515187029135-18ee286d815b?w=800&q=80",
        "Pittsburgh, Pennsylvania, USA", "May 14-22, 2025", "9:00 AM - 6:00 PM EDT",
        venue="David L. Lawrence Convention Center", tags=["python", "community"],
        organizer="Python Software Foundation",
    ),
    _conference(
        "Next.js Conf 2024",
        "https://images.unsplash.com/photo-1492684223066-81342ee5ff30?w=800&q=80",
        "San Francisco, California, USA", "October 24, 2024", "9:00 AM - 6:00 PM PDT",
        venue="The Midway", mode="hybrid", tags=["nextjs", "react", "frontend"],
        organizer="Vercel",
    ),
    _conference(
        "DevOps World 2024",
        "https://images.unsplash.com/photo-1511578314322-379afb476865?w=800&q=80",
        "Las Vegas, Nevada, USA", "December 10-12, 2024", "8:30 AM - 6:00 PM PST",
        venue="Caesars Forum", tags=["devops", "ci-cd"],
        organizer="CloudBees",
    ),
    _conference(
        "ETHDenver 2025",
        "https://images.unsplash.com/photo-1464047736614-af63643285bf?w=800&q=80",
        "Denver, Colorado, USA", "February 28 - March 9, 2025", "10:00 AM - 8:00 PM MST",
        venue="National Western Complex", tags=["ethereum", "web3", "blockchain"],
        organizer="SporkDAO",
    ),
    _conference(
        "Apple WWDC 2025",
        "https://images.unsplash.com/photo-1523580494863-6f3031224c94?w=800&q=80",
        "Cupertino, California, USA", "June 9-13, 2025", "10:00 AM - 6:00 PM PDT",
        venue="Apple Park", mode="hybrid", tags=["apple", "swift", "ios"],
        organizer="Apple",
    ),
    _conference(
        "ViteConf 2024",
        "https://images.unsplash.com/photo-1560439514-4e9645039924?w=800&q=80",
        "Online Event", "October 3, 2024", "12:00 PM - 8:00 PM UTC",
        venue="Online", mode="online", tags=["vite", "javascript", "tooling"],
        organizer="StackBlitz",
    ),
]


async def seed_events(db: AsyncSession, entries: list[dict[str, Any]] = CATALOGUE) -> list[Event]:
    """Insert catalogue entries whose base slug is not yet taken; return the created events."""
    created = []
    for entry in entries:
        event_data = validate_fields(EventCreate, entry)
        if await slug_taken(db, derive_base_slug(event_data.title)):
            logger.info("seed_event_skipped", title=event_data.title)
            continue
        created.append(await create_event(db, event_data))

    logger.info("seed_completed", created=len(created), total=len(entries))
    return created
