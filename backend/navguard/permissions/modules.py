# Overview: Permission module names used to group the catalog for display and bulk toggling.


class PermissionModule:
    """Permission modules for organization and UI display."""
    GENERAL = "General"
    DASHBOARD = "Dashboard"
    APPOINTMENTS = "Appointments"
    PATIENTS = "Patients"
    CLINICAL = "Clinical"
    STAFF = "Staff"
    BILLING = "Billing"
    CONTENT = "Content"
    OPERATIONS = "Operations"
    SETTINGS = "Settings"
    FACILITIES = "Facilities"
    ACCESS_CONTROL = "Access Control"
    NOTIFICATIONS = "Notifications"


DEFAULT_MODULE = PermissionModule.GENERAL


def normalize_module(value: str | None) -> str:
    """
    Map an optional module label onto a grouping key.

    None, "" and whitespace-only labels all mean the default module, so the
    catalog never holds two spellings of "no module".
    """
    if value is None:
        return DEFAULT_MODULE
    value = value.strip()
    return value or DEFAULT_MODULE
