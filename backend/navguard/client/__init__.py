# Overview: Async operator-side client: HTTP API wrapper, auth provider, role-permission editor.

from .auth import AuthProvider
from .editor import EditorState, PermissionRecord, RolePermissionEditor, RoleRecord
from .http import AdminApiClient, PermissionsApi, RolesApi

__all__ = [
    "AdminApiClient",
    "AuthProvider",
    "EditorState",
    "PermissionRecord",
    "PermissionsApi",
    "RolePermissionEditor",
    "RoleRecord",
    "RolesApi",
]
