from .base import Base
from .user import User, UserRole
from .patient import Patient, PatientStatus, Gender
from .wound import Wound, WoundType, WoundStage, WoundStatus
from .treatment import Treatment, TreatmentType, TreatmentStatus
from .image import WoundImage, BeforeAfterType

__all__ = [
    "Base",
    "User", "UserRole",
    "Patient", "PatientStatus", "Gender",
    "Wound", "WoundType", "WoundStage", "WoundStatus",
    "Treatment", "TreatmentType", "TreatmentStatus",
    "WoundImage", "BeforeAfterType",
]
