"""
Role-based permission matrix.
Defines what each professional role is allowed to do in the system.
"""
from types import MappingProxyType
from typing import FrozenSet, Iterable, Mapping, Optional

from ..models.user import UserRole

# Permission constants
PERM_PATIENT_CREATE = "patient:create"
PERM_PATIENT_READ = "patient:read"
PERM_PATIENT_UPDATE = "patient:update"
PERM_PATIENT_DELETE = "patient:delete"

PERM_WOUND_CREATE = "wound:create"
PERM_WOUND_READ = "wound:read"
PERM_WOUND_UPDATE = "wound:update"
PERM_WOUND_DELETE = "wound:delete"

PERM_TREATMENT_CREATE = "treatment:create"
PERM_TREATMENT_READ = "treatment:read"
PERM_TREATMENT_UPDATE = "treatment:update"
PERM_TREATMENT_DELETE = "treatment:delete"

PERM_IMAGE_CREATE = "image:create"
PERM_IMAGE_READ = "image:read"
PERM_IMAGE_UPDATE = "image:update"
PERM_IMAGE_DELETE = "image:delete"

PERM_REPORTS_READ = "reports:read"
PERM_REPORTS_EXPORT = "reports:export"

PERM_USER_MANAGE = "user:manage"
PERM_SYSTEM_CONFIG = "system:config"

PERM_TELEMEDICINE_ACCESS = "telemedicine:access"
PERM_TELEMEDICINE_MODERATE = "telemedicine:moderate"

ALL_PERMISSIONS: FrozenSet[str] = frozenset({
    PERM_PATIENT_CREATE, PERM_PATIENT_READ, PERM_PATIENT_UPDATE, PERM_PATIENT_DELETE,
    PERM_WOUND_CREATE, PERM_WOUND_READ, PERM_WOUND_UPDATE, PERM_WOUND_DELETE,
    PERM_TREATMENT_CREATE, PERM_TREATMENT_READ, PERM_TREATMENT_UPDATE, PERM_TREATMENT_DELETE,
    PERM_IMAGE_CREATE, PERM_IMAGE_READ, PERM_IMAGE_UPDATE, PERM_IMAGE_DELETE,
    PERM_REPORTS_READ, PERM_REPORTS_EXPORT,
    PERM_USER_MANAGE, PERM_SYSTEM_CONFIG,
    PERM_TELEMEDICINE_ACCESS, PERM_TELEMEDICINE_MODERATE,
})

# Role permission matrix (read-only after import)
ROLE_PERMISSIONS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    UserRole.ADMIN: ALL_PERMISSIONS,
    UserRole.DOCTOR: frozenset({
        PERM_PATIENT_CREATE,
        PERM_PATIENT_READ,
        PERM_PATIENT_UPDATE,
        PERM_WOUND_CREATE,
        PERM_WOUND_READ,
        PERM_WOUND_UPDATE,
        PERM_TREATMENT_CREATE,
        PERM_TREATMENT_READ,
        PERM_TREATMENT_UPDATE,
        PERM_IMAGE_CREATE,
        PERM_IMAGE_READ,
        PERM_IMAGE_UPDATE,
        PERM_REPORTS_READ,
        PERM_TELEMEDICINE_ACCESS,
        PERM_TELEMEDICINE_MODERATE,
    }),
    UserRole.NURSE: frozenset({
        PERM_PATIENT_READ,
        PERM_PATIENT_UPDATE,
        PERM_WOUND_CREATE,
        PERM_WOUND_READ,
        PERM_WOUND_UPDATE,
        PERM_TREATMENT_CREATE,
        PERM_TREATMENT_READ,
        PERM_TREATMENT_UPDATE,
        PERM_IMAGE_CREATE,
        PERM_IMAGE_READ,
        PERM_IMAGE_UPDATE,
        PERM_TELEMEDICINE_ACCESS,
    }),
    UserRole.PHYSIOTHERAPIST: frozenset({
        PERM_PATIENT_READ,
        PERM_WOUND_READ,
        PERM_TREATMENT_READ,
        PERM_TREATMENT_UPDATE,
        PERM_IMAGE_READ,
        PERM_TELEMEDICINE_ACCESS,
    }),
    UserRole.NUTRITIONIST: frozenset({
        PERM_PATIENT_READ,
        PERM_WOUND_READ,
        PERM_TREATMENT_READ,
        PERM_IMAGE_READ,
        PERM_TELEMEDICINE_ACCESS,
    }),
    UserRole.PATIENT: frozenset({
        PERM_TELEMEDICINE_ACCESS,
        # Patients never see other patients' records
    }),
})


def permissions_for(role: Optional[str]) -> FrozenSet[str]:
    return ROLE_PERMISSIONS.get(role, frozenset())


def has_permission(role: Optional[str], permission: Optional[str]) -> bool:
    """Check if a role has a specific permission."""
    return permission in permissions_for(role)


def check_permissions(role: Optional[str], permissions: Iterable[str]) -> bool:
    """True when the role holds every permission in ``permissions``."""
    granted = permissions_for(role)
    return all(p in granted for p in permissions)
