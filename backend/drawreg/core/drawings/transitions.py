"""
Status rules shared by drawing creation and the approval state machine.

Transitions are permissive: any manual status may follow any other. Some
targets stamp extra fields on the row; see STATUS_SIDE_EFFECTS.
"""
from datetime import datetime
from typing import Callable

from drawreg.core.drawings.enums import DrawingStatus
from drawreg.core.drawings.models import Drawing
from drawreg.core.errors import ValidationError

ISSUED_FOR_CONSTRUCTION = "Construction"

# superseded is assigned only by the supersession linker
MANUAL_STATUSES = frozenset(s for s in DrawingStatus if s is not DrawingStatus.SUPERSEDED)


def _stamp_approval(drawing: Drawing, actor: str, now: datetime) -> None:
    drawing.approved_by = actor
    drawing.issue_date = now


def _stamp_construction_issue(drawing: Drawing, actor: str, now: datetime) -> None:
    drawing.issued_for = ISSUED_FOR_CONSTRUCTION


STATUS_SIDE_EFFECTS: dict[DrawingStatus, Callable[[Drawing, str, datetime], None]] = {
    DrawingStatus.APPROVED: _stamp_approval,
    DrawingStatus.FOR_CONSTRUCTION: _stamp_construction_issue,
}


def require_manual_status(status: DrawingStatus) -> DrawingStatus:
    if status not in MANUAL_STATUSES:
        raise ValidationError(
            f"Status '{status.value}' is assigned by revisioning and cannot be set directly",
            field="status",
        )
    return status


def apply_status(drawing: Drawing, status: DrawingStatus, actor: str, now: datetime) -> None:
    drawing.status = status.value
    effect = STATUS_SIDE_EFFECTS.get(status)
    if effect:
        effect(drawing, actor, now)
