# Overview: Default roles and their permission sets, applied by `flask system init`.

from .definitions import PERMISSION_DEFINITIONS

PATIENT_ROLE = "patient"

# (name, description, is_system)
DEFAULT_ROLES = [
    ("admin", "Full access to the admin console", True),
    ("doctor", "Clinical staff", True),
    ("staff", "Operational staff", True),
    ("receptionist", "Front desk", False),
    (PATIENT_ROLE, "Patients of the public site; never sees the admin console", True),
]

DEFAULT_ROLE_PERMISSIONS = {
    "admin": [perm[0] for perm in PERMISSION_DEFINITIONS],
    "doctor": [
        "view-dashboard",
        "view-appointments",
        "view-schedules",
        "view-patients",
        "view-patient-reports",
        "view-prescriptions",
        "view-medicines",
        "view-laboratory",
        "view-notifications",
    ],
    "staff": [
        "view-dashboard",
        "view-appointments",
        "view-patients",
        "view-bills",
        "view-medicines",
        "view-doctors",
        "view-inventory",
        "view-rooms",
        "view-notifications",
    ],
    "receptionist": [
        "view-appointments",
        "view-patients",
        "view-contact-inquiries",
    ],
    PATIENT_ROLE: [],
}
