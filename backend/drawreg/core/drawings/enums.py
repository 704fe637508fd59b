import enum
from typing import TypeVar

from drawreg.core.errors import ValidationError


class DrawingStatus(str, enum.Enum):
    DRAFT = "draft"
    FOR_REVIEW = "for_review"
    FOR_APPROVAL = "for_approval"
    APPROVED = "approved"
    FOR_CONSTRUCTION = "for_construction"
    AS_BUILT = "as_built"
    SUPERSEDED = "superseded"
    OBSOLETE = "obsolete"


class DrawingType(str, enum.Enum):
    ARCHITECTURAL = "architectural"
    STRUCTURAL = "structural"
    MECHANICAL = "mechanical"
    ELECTRICAL = "electrical"
    PLUMBING = "plumbing"
    CIVIL = "civil"
    LANDSCAPE = "landscape"
    DETAIL = "detail"
    SECTION = "section"
    ELEVATION = "elevation"
    PLAN = "plan"
    SCHEDULE = "schedule"
    DIAGRAM = "diagram"
    OTHER = "other"


class DrawingDiscipline(str, enum.Enum):
    ARCHITECTURE = "A"
    CIVIL = "C"
    ELECTRICAL = "E"
    FIRE_PROTECTION = "F"
    GENERAL = "G"
    HVAC = "H"
    INTERIOR = "I"
    LANDSCAPE = "L"
    MECHANICAL = "M"
    PLUMBING = "P"
    STRUCTURAL = "S"
    TELECOM = "T"


E = TypeVar("E", bound=enum.Enum)


def coerce_enum(enum_cls: type[E], value: E | str, field: str) -> E:
    """Reject values outside the closed enumeration instead of persisting them."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {field} '{value}'. Allowed: {allowed}", field=field) from None
