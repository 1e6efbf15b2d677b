# Overview: Exception taxonomy shared by services, blueprints and the async client.


class NavguardError(Exception):
    """Base class for all navguard errors."""


class ValidationError(NavguardError):
    """Input is malformed (HTTP 400)."""


class NotFoundError(NavguardError):
    """A role, permission or user does not exist (HTTP 404)."""


class ConflictError(NavguardError):
    """
    Mutation rejected because of the current state (HTTP 409).

    Examples: duplicate role name, deleting a system role, deleting a role
    still held by a user, deleting a permission still granted to a role.
    """


class TransientNetworkError(NavguardError):
    """A catalog/registry call failed in transport or with a 5xx. Never retried automatically."""


class EditorStateError(NavguardError):
    """Role-permission editor action attempted in a state that does not allow it."""


class RouteTableError(NavguardError):
    """Route declaration table is inconsistent with the permission catalog."""

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("Invalid route table: " + "; ".join(self.problems))


class AccessRestrictedError(NavguardError):
    """Valid credentials belong to an identity barred from the console (patient role)."""
