# Overview: Slug helpers for the permission catalog.

import re

from .definitions import PERMISSION_DEFINITIONS

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def get_all_permission_slugs():
    """Get list of all permission slugs."""
    return [perm[0] for perm in PERMISSION_DEFINITIONS]


def slugify(name: str) -> str:
    """Derive a slug from a display name: "View Lab Results" -> "view-lab-results"."""
    return _NON_SLUG.sub("-", (name or "").lower()).strip("-")
