# Overview: Permission catalog package.
# Re-exports the static definitions, default roles and slug helpers.

from .modules import PermissionModule, DEFAULT_MODULE, normalize_module
from .definitions import PERMISSION_DEFINITIONS, PermissionSlug
from .roles import DEFAULT_ROLES, DEFAULT_ROLE_PERMISSIONS, PATIENT_ROLE
from .helpers import get_all_permission_slugs, slugify

__all__ = [
    "PermissionModule",
    "DEFAULT_MODULE",
    "normalize_module",
    "PERMISSION_DEFINITIONS",
    "PermissionSlug",
    "DEFAULT_ROLES",
    "DEFAULT_ROLE_PERMISSIONS",
    "PATIENT_ROLE",
    "get_all_permission_slugs",
    "slugify",
]
