"""
Demo fixtures written into an empty local store.

Fixtures are templates; ids and timestamps are stamped at seed time so every
seeded record gets its own id.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .models import Table
from .stamps import new_id

_PEXELS = "https://images.pexels.com/photos/{id}/pexels-photo-{id}.jpeg?auto=compress&cs=tinysrgb&w={w}"


def _img(photo_id: int, width: int = 800) -> str:
    return _PEXELS.format(id=photo_id, w=width)


DEFAULT_ADMIN_USERNAME = "admin123"
DEFAULT_ADMIN_PASSWORD = "admin123"


FIXTURES: Dict[Table, List[Dict[str, Any]]] = {
    Table.SERVICES: [
        {
            "title": "Professional Lawn Mowing",
            "description": "Regular lawn mowing service to keep your grass healthy and well-maintained.",
            "image": _img(1453499),
            "category": "maintenance",
        },
        {
            "title": "Landscape Design",
            "description": "Custom landscape design services to transform your outdoor space.",
            "image": _img(1080696),
            "category": "design",
        },
        {
            "title": "Tree Trimming & Pruning",
            "description": "Professional tree care services to maintain healthy and beautiful trees.",
            "image": _img(416978),
            "category": "maintenance",
        },
    ],
    Table.PROJECTS: [
        {
            "title": "Modern Front Yard Makeover",
            "description": "Complete transformation of a residential front yard with new landscaping.",
            "before_image": _img(1453499),
            "after_image": _img(1080696),
            "client_name": "John Smith",
        },
        {
            "title": "Backyard Garden Installation",
            "description": "Beautiful garden installation with native plants and irrigation system.",
            "before_image": _img(416978),
            "after_image": _img(1049298),
            "client_name": "Mary Johnson",
        },
    ],
    Table.GALLERY: [
        {"image": _img(1453499), "caption": "Beautiful lawn maintenance"},
        {"image": _img(1080696), "caption": "Professional landscaping"},
        {"image": _img(416978), "caption": "Garden installation"},
    ],
    Table.TESTIMONIALS: [
        {
            "client_name": "Sarah Johnson",
            "review_text": "Excellent service! My lawn has never looked better.",
            "rating": 5,
            "status": "approved",
        },
        {
            "client_name": "Mike Davis",
            "review_text": "Professional team and great results. Highly recommended!",
            "rating": 5,
            "status": "approved",
        },
        {
            "client_name": "Lisa Chen",
            "review_text": "Amazing transformation of our backyard. Thank you!",
            "rating": 4,
            "status": "pending",
        },
    ],
    Table.SLIDER_IMAGES: [
        {"image": _img(1453499, 1920), "caption": "Professional Lawn Care Services"},
        {"image": _img(1080696, 1920), "caption": "Beautiful Landscape Design"},
    ],
    Table.ADMIN_CREDENTIALS: [
        {"username": DEFAULT_ADMIN_USERNAME, "password": DEFAULT_ADMIN_PASSWORD},
    ],
    Table.BOOKINGS: [],
}


def build_fixtures(table: Table, seeded_at: str) -> List[Dict[str, Any]]:
    records = []
    for template in FIXTURES[table]:
        record = dict(template)
        record["id"] = new_id()
        if table is Table.ADMIN_CREDENTIALS:
            record["updated_at"] = seeded_at
        else:
            record["created_at"] = seeded_at
        records.append(record)
    return records
