from sqlalchemy import Column, String, Float, Text, Boolean, ForeignKey, Integer, Index
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin, generate_uuid


class WoundType:
    PRESSURE_ULCER = "PRESSURE_ULCER"
    DIABETIC_ULCER = "DIABETIC_ULCER"
    VENOUS_ULCER = "VENOUS_ULCER"
    ARTERIAL_ULCER = "ARTERIAL_ULCER"
    SURGICAL = "SURGICAL"
    TRAUMATIC = "TRAUMATIC"
    BURN = "BURN"
    OTHER = "OTHER"

    ALL = [
        PRESSURE_ULCER, DIABETIC_ULCER, VENOUS_ULCER, ARTERIAL_ULCER,
        SURGICAL, TRAUMATIC, BURN, OTHER
    ]


class WoundStage:
    # NPIAP pressure injury staging
    STAGE_1 = "STAGE_1"
    STAGE_2 = "STAGE_2"
    STAGE_3 = "STAGE_3"
    STAGE_4 = "STAGE_4"
    UNSTAGEABLE = "UNSTAGEABLE"
    SUSPECTED_DTI = "SUSPECTED_DTI"  # deep tissue injury

    ALL = [STAGE_1, STAGE_2, STAGE_3, STAGE_4, UNSTAGEABLE, SUSPECTED_DTI]


class WoundStatus:
    ACTIVE = "ACTIVE"
    HEALING = "HEALING"
    HEALED = "HEALED"
    INFECTED = "INFECTED"
    DETERIORATING = "DETERIORATING"

    ALL = [ACTIVE, HEALING, HEALED, INFECTED, DETERIORATING]
    OPEN = [ACTIVE, HEALING, INFECTED, DETERIORATING]


class TissueType:
    GRANULATION = "GRANULATION"    # Red - healthy healing
    EPITHELIAL = "EPITHELIAL"      # Pink - new skin
    SLOUGH = "SLOUGH"              # Yellow - fibrinous, needs debridement
    NECROTIC = "NECROTIC"          # Black - dead tissue
    MIXED = "MIXED"

    ALL = [GRANULATION, EPITHELIAL, SLOUGH, NECROTIC, MIXED]


class ExudateAmount:
    NONE = "NONE"
    MINIMAL = "MINIMAL"
    MODERATE = "MODERATE"
    HEAVY = "HEAVY"

    ALL = [NONE, MINIMAL, MODERATE, HEAVY]


class ExudateType:
    SEROUS = "SEROUS"
    SANGUINEOUS = "SANGUINEOUS"
    SEROSANGUINEOUS = "SEROSANGUINEOUS"
    PURULENT = "PURULENT"

    ALL = [SEROUS, SANGUINEOUS, SEROSANGUINEOUS, PURULENT]


class Odor:
    NONE = "NONE"
    MILD = "MILD"
    MODERATE = "MODERATE"
    STRONG = "STRONG"

    ALL = [NONE, MILD, MODERATE, STRONG]


class SkinTemperature:
    NORMAL = "NORMAL"
    WARM = "WARM"
    HOT = "HOT"
    COOL = "COOL"

    ALL = [NORMAL, WARM, HOT, COOL]


class PeriwoundSkin:
    INTACT = "INTACT"
    MACERATED = "MACERATED"
    EXCORIATED = "EXCORIATED"
    INDURATED = "INDURATED"
    ERYTHEMATOUS = "ERYTHEMATOUS"

    ALL = [INTACT, MACERATED, EXCORIATED, INDURATED, ERYTHEMATOUS]


class Wound(Base, TimestampMixin):
    __tablename__ = "wounds"
    __table_args__ = (
        Index("ix_wounds_status_created_at", "status", "created_at"),
        Index("ix_wounds_type_status", "type", "status"),
    )

    id = Column(String, primary_key=True, default=generate_uuid)
    patient_id = Column(String, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_id = Column(String, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    location = Column(String(200), nullable=False)  # anatomical region, e.g. "sacrum"
    type = Column(String(30), nullable=False)
    stage = Column(String(20), nullable=True)
    status = Column(String(20), nullable=False, default=WoundStatus.ACTIVE)

    # Measurements (cm / cm²)
    length = Column(Float, nullable=True)
    width = Column(Float, nullable=True)
    depth = Column(Float, nullable=True)
    area = Column(Float, nullable=True)

    # Wound bed
    tissue_type = Column(String(20), nullable=True)
    exudate = Column(String(20), nullable=True)
    exudate_type = Column(String(20), nullable=True)
    odor = Column(String(20), nullable=True)
    pain = Column(Integer, nullable=True)  # 0-10 scale
    edema = Column(Boolean, nullable=False, default=False)
    infection = Column(Boolean, nullable=False, default=False)
    temperature = Column(String(20), nullable=True)
    periwound_skin = Column(String(20), nullable=True)

    description = Column(Text, nullable=True)
    risk_factors = Column(Text, nullable=True)
    previous_treatments = Column(Text, nullable=True)

    patient = relationship("Patient", back_populates="wounds")
    created_by = relationship("User")
    treatments = relationship("Treatment", back_populates="wound", order_by="Treatment.created_at.desc()")
    images = relationship(
        "WoundImage", back_populates="wound", cascade="all, delete-orphan", order_by="WoundImage.created_at.desc()"
    )
