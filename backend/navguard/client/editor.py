# Overview: Operator workflow for editing which permissions a role holds.

"""
Role-permission editor.

States:
- LOADING: roles and the permission catalog are being fetched (or the last
  fetch failed; `error` says why and load() may be called again)
- IDLE: data loaded, the working set can be edited and saved
- SAVING: a full-set replacement is in flight; no edits, no second save

The working set is local until save(): toggling a permission or a whole
module never touches the network. save() sends the complete set, so the
stored role ends up holding exactly what the operator sees.

close() mirrors a view being torn down: anything that completes afterwards
is dropped on the floor instead of being written into the editor.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Set

from ..errors import EditorStateError
from ..identity import IdentityContext
from ..permissions import PermissionSlug, normalize_module

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    LOADING = "loading"
    IDLE = "idle"
    SAVING = "saving"


@dataclass(frozen=True)
class PermissionRecord:
    id: int
    slug: str
    name: str
    module: str
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping) -> "PermissionRecord":
        return cls(
            id=data["id"],
            slug=data["slug"],
            name=data.get("name") or data["slug"],
            module=normalize_module(data.get("module")),
            description=data.get("description"),
        )


@dataclass(frozen=True)
class RoleRecord:
    id: int
    name: str
    description: Optional[str] = None
    is_system: bool = False
    permission_ids: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_dict(cls, data: Mapping) -> "RoleRecord":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description"),
            is_system=bool(data.get("is_system")),
            permission_ids=frozenset(p["id"] for p in data.get("permissions") or ()),
        )


class RolePermissionEditor:
    """
    One editor per operator session.

    `api` must provide list_roles(), list_permissions() and
    assign_permissions(role_id, ids) as coroutines (AdminApiClient does).
    When `identity_context` is given, saving requires manage-roles.
    """

    def __init__(self, api, identity_context: Optional[IdentityContext] = None):
        self.api = api
        self.identity_context = identity_context

        self.state = EditorState.LOADING
        self.error: Optional[Exception] = None
        self.roles: List[RoleRecord] = []
        self.permissions: List[PermissionRecord] = []
        self.selected_role: Optional[RoleRecord] = None
        self._working: Set[int] = set()

        self._closed = False
        self._load_seq = 0

    # Loading

    async def load(self) -> None:
        """
        Fetch roles and permissions concurrently.

        On success the previously selected role is kept when it still exists,
        otherwise the first role is selected. On failure the editor stays in
        LOADING with `error` set.
        """
        if self._closed:
            raise EditorStateError("editor is closed")
        if self.state is EditorState.SAVING:
            raise EditorStateError("cannot reload while a save is in progress")

        self._load_seq += 1
        seq = self._load_seq
        self.state = EditorState.LOADING
        self.error = None

        try:
            roles_data, permissions_data = await asyncio.gather(
                self.api.list_roles(),
                self.api.list_permissions(),
            )
            roles = [RoleRecord.from_dict(r) for r in roles_data]
            permissions = sorted(
                (PermissionRecord.from_dict(p) for p in permissions_data),
                key=lambda p: (p.module, p.slug),
            )
        except Exception as e:
            if self._closed or seq != self._load_seq:
                return
            logger.warning("Loading roles and permissions failed: %s", e)
            self.error = e
            return

        if self._closed or seq != self._load_seq:
            return

        self.roles = roles
        self.permissions = permissions

        previous_id = self.selected_role.id if self.selected_role else None
        selected = next((r for r in self.roles if r.id == previous_id), None)
        if selected is None and self.roles:
            selected = self.roles[0]
        self._select(selected)
        self.state = EditorState.IDLE

    # Working set

    def _require_idle(self, action: str) -> None:
        if self.state is not EditorState.IDLE:
            raise EditorStateError(f"cannot {action} while {self.state.value}")

    def _select(self, role: Optional[RoleRecord]) -> None:
        self.selected_role = role
        self._working = set(role.permission_ids) if role else set()

    def select_role(self, role_id: int) -> RoleRecord:
        """Switch roles. Unsaved toggles on the previous role are discarded."""
        self._require_idle("select a role")
        role = next((r for r in self.roles if r.id == role_id), None)
        if role is None:
            raise EditorStateError(f"role {role_id} is not loaded")
        self._select(role)
        return role

    @property
    def selected_permission_ids(self) -> frozenset:
        return frozenset(self._working)

    @property
    def is_dirty(self) -> bool:
        if self.selected_role is None:
            return False
        return self._working != set(self.selected_role.permission_ids)

    def toggle_permission(self, permission_id: int) -> bool:
        """Flip one permission. Returns whether it is now selected."""
        self._require_idle("toggle a permission")
        if permission_id in self._working:
            self._working.discard(permission_id)
            return False
        self._working.add(permission_id)
        return True

    def _module_ids(self, module: Optional[str]) -> Set[int]:
        module = normalize_module(module)
        return {p.id for p in self.permissions if p.module == module}

    def is_module_selected(self, module: Optional[str]) -> bool:
        ids = self._module_ids(module)
        return bool(ids) and ids <= self._working

    def toggle_module(self, module: Optional[str]) -> bool:
        """
        All of the module selected -> remove all of it; otherwise add what is missing.

        Permissions outside the module are untouched. Returns whether the
        module is fully selected afterwards.
        """
        self._require_idle("toggle a module")
        ids = self._module_ids(module)
        if ids and ids <= self._working:
            self._working -= ids
            return False
        self._working |= ids
        return bool(ids)

    def grouped_permissions(self) -> Dict[str, List[PermissionRecord]]:
        groups: Dict[str, List[PermissionRecord]] = {}
        for permission in self.permissions:
            groups.setdefault(permission.module, []).append(permission)
        return groups

    # Saving

    @property
    def can_save(self) -> bool:
        if self._closed or self.state is not EditorState.IDLE or self.selected_role is None:
            return False
        if self.identity_context is None:
            return True
        return self.identity_context.identity.has_permission(PermissionSlug.MANAGE_ROLES)

    async def save(self) -> Optional[RoleRecord]:
        """
        Replace the selected role's permissions with the working set.

        Success reloads roles and permissions. Failure returns to IDLE with
        the working set untouched and `error` set, then re-raises.
        """
        if not self.can_save:
            if self.state is EditorState.IDLE and self.selected_role is not None and not self._closed:
                raise EditorStateError("manage-roles permission required to save")
            raise EditorStateError(f"cannot save while {self.state.value}")

        role = self.selected_role
        desired = set(self._working)
        self.state = EditorState.SAVING
        self.error = None

        try:
            await self.api.assign_permissions(role.id, desired)
        except Exception as e:
            if self._closed:
                return None
            logger.warning("Saving permissions for role %s failed: %s", role.name, e)
            self.state = EditorState.IDLE
            self.error = e
            raise

        if self._closed:
            return None

        logger.info("Saved %d permission(s) for role %s", len(desired), role.name)
        self.state = EditorState.IDLE
        await self.load()
        return self.selected_role

    def close(self) -> None:
        """Stop accepting results; in-flight loads and saves become no-ops."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

