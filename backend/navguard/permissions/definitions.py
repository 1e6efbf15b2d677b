# Overview: Static permission catalog for the hospital admin console.
# Each permission is defined as: (slug, name, description, module)

from enum import Enum

from .modules import PermissionModule


DASHBOARD_PERMISSIONS = [
    ("view-dashboard", "View Dashboard", "Open the dashboard home page", PermissionModule.DASHBOARD),
]

APPOINTMENT_PERMISSIONS = [
    ("view-appointments", "View Appointments", "List and open appointments", PermissionModule.APPOINTMENTS),
    ("view-schedules", "View Schedules", "See doctor and staff schedules", PermissionModule.APPOINTMENTS),
]

PATIENT_PERMISSIONS = [
    ("view-patients", "View Patients", "List and open patient records", PermissionModule.PATIENTS),
    ("view-patient-reports", "View Patient Reports", "Open uploaded patient reports", PermissionModule.PATIENTS),
    ("view-emergency", "View Emergency", "Emergency admissions board", PermissionModule.PATIENTS),
]

CLINICAL_PERMISSIONS = [
    ("view-prescriptions", "View Prescriptions", "List and write prescriptions", PermissionModule.CLINICAL),
    ("view-medicines", "View Medicines", "Medicine master list", PermissionModule.CLINICAL),
    ("view-pharmacy", "View Pharmacy", "Pharmacy stock and dispensing", PermissionModule.CLINICAL),
    ("view-laboratory", "View Laboratory", "Laboratory orders and results", PermissionModule.CLINICAL),
]

STAFF_PERMISSIONS = [
    ("view-doctors", "View Doctors", "Doctor directory", PermissionModule.STAFF),
    ("view-staff", "View Staff", "Staff directory", PermissionModule.STAFF),
    ("view-departments", "View Departments", "Hospital departments", PermissionModule.STAFF),
]

BILLING_PERMISSIONS = [
    ("view-bills", "View Bills", "Manage patient bills", PermissionModule.BILLING),
    ("view-billing-finance", "View Billing & Finance", "Billing and finance overview", PermissionModule.BILLING),
]

CONTENT_PERMISSIONS = [
    ("view-services", "View Services", "Public services catalogue and home care", PermissionModule.CONTENT),
    ("view-gallery", "View Gallery", "Public gallery", PermissionModule.CONTENT),
    ("view-testimonials", "View Testimonials", "Public testimonials", PermissionModule.CONTENT),
    ("view-faq", "View FAQ", "Public FAQ entries", PermissionModule.CONTENT),
    ("view-contact-inquiries", "View Contact Inquiries", "Inbound contact form messages", PermissionModule.CONTENT),
    ("view-health-packages", "View Health Packages", "Health package offers", PermissionModule.CONTENT),
]

OPERATIONS_PERMISSIONS = [
    ("view-inventory", "View Inventory", "Hospital inventory", PermissionModule.OPERATIONS),
    ("view-reports", "View Reports", "Operational reports", PermissionModule.OPERATIONS),
]

FACILITY_PERMISSIONS = [
    ("view-rooms", "View Rooms & Beds", "Room and bed occupancy", PermissionModule.FACILITIES),
]

SETTINGS_PERMISSIONS = [
    ("view-settings", "View Settings", "Platform settings and integrations", PermissionModule.SETTINGS),
]

ACCESS_CONTROL_PERMISSIONS = [
    ("view-roles", "View Roles", "List roles and their members", PermissionModule.ACCESS_CONTROL),
    ("manage-roles", "Manage Roles", "Create, edit and delete roles and their permission sets", PermissionModule.ACCESS_CONTROL),
    ("view-permissions", "View Permissions", "List the permission catalog", PermissionModule.ACCESS_CONTROL),
    ("manage-permissions", "Manage Permissions", "Create, edit and delete catalog permissions", PermissionModule.ACCESS_CONTROL),
    ("assign-roles", "Assign Roles", "Change the role held by a user", PermissionModule.ACCESS_CONTROL),
]

NOTIFICATION_PERMISSIONS = [
    ("view-notifications", "View Notifications", "Notification inbox", PermissionModule.NOTIFICATIONS),
]


PERMISSION_DEFINITIONS = (
    DASHBOARD_PERMISSIONS
    + APPOINTMENT_PERMISSIONS
    + PATIENT_PERMISSIONS
    + CLINICAL_PERMISSIONS
    + STAFF_PERMISSIONS
    + BILLING_PERMISSIONS
    + CONTENT_PERMISSIONS
    + OPERATIONS_PERMISSIONS
    + FACILITY_PERMISSIONS
    + SETTINGS_PERMISSIONS
    + ACCESS_CONTROL_PERMISSIONS
    + NOTIFICATION_PERMISSIONS
)


def _member_name(slug: str) -> str:
    return slug.upper().replace("-", "_")


# Closed enumeration generated from the definitions above.
# Route declarations reference members, so a misspelled slug fails at import.
PermissionSlug = Enum(
    "PermissionSlug",
    [(_member_name(perm[0]), perm[0]) for perm in PERMISSION_DEFINITIONS],
    type=str,
)
