# patientdesk/domain/shifts.py
"""
Weekend classification and shift-type rules for admissions.

The hospital works a Sunday-Thursday week, so the weekend is Friday and
Saturday. Every admission write goes through ``classify_admission`` which
derives the weekend flag from the admission date and only then checks the
shift label against it.

These are pure functions with no database access.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from zoneinfo import ZoneInfo


class ShiftType(str, Enum):
    MORNING = "morning"
    EVENING = "evening"
    NIGHT = "night"
    WEEKEND_MORNING = "weekend_morning"  # 07:00 - 19:00
    WEEKEND_NIGHT = "weekend_night"  # 19:00 - 07:00


class SafetyType(str, Enum):
    EMERGENCY = "emergency"
    OBSERVATION = "observation"
    SHORT_STAY = "short-stay"


WEEKDAY_SHIFTS = frozenset({ShiftType.MORNING, ShiftType.EVENING, ShiftType.NIGHT})
WEEKEND_SHIFTS = frozenset({ShiftType.WEEKEND_MORNING, ShiftType.WEEKEND_NIGHT})

# Python weekday(): Monday=0 ... Friday=4, Saturday=5
WEEKEND_WEEKDAYS = frozenset({4, 5})

WEEKEND_REQUIRES_WEEKEND_SHIFT = "Weekend admissions must use weekend shift types"
WEEKDAY_FORBIDS_WEEKEND_SHIFT = "Weekday admissions cannot use weekend shift types"


@dataclass(frozen=True)
class ShiftCheck:
    """Outcome of a shift validation: ``ok`` or a rejection ``reason``."""

    ok: bool
    is_weekend: bool
    shift_type: ShiftType | None = None
    reason: str | None = None


def is_weekend(value: date | datetime, tz: str | None = None) -> bool:
    """
    True when ``value`` falls on a Friday or Saturday.

    Timezone-aware datetimes are converted to ``tz`` first (when given) so an
    admission late on Thursday UTC can still land on a local Friday.
    """
    if isinstance(value, datetime) and value.tzinfo is not None and tz:
        value = value.astimezone(ZoneInfo(tz))
    return value.weekday() in WEEKEND_WEEKDAYS


def validate_shift_type(weekend: bool, shift_type: ShiftType | str) -> ShiftCheck:
    shift = ShiftType(shift_type)
    if weekend and shift not in WEEKEND_SHIFTS:
        return ShiftCheck(ok=False, is_weekend=weekend, shift_type=shift, reason=WEEKEND_REQUIRES_WEEKEND_SHIFT)
    if not weekend and shift in WEEKEND_SHIFTS:
        return ShiftCheck(ok=False, is_weekend=weekend, shift_type=shift, reason=WEEKDAY_FORBIDS_WEEKEND_SHIFT)
    return ShiftCheck(ok=True, is_weekend=weekend, shift_type=shift)


def classify_admission(
    admission_date: date | datetime,
    shift_type: ShiftType | str,
    tz: str | None = None,
) -> ShiftCheck:
    """
    Derive the weekend flag from ``admission_date`` and validate ``shift_type``
    against it. Any weekend flag the caller had is ignored.
    """
    return validate_shift_type(is_weekend(admission_date, tz), shift_type)


def allowed_shifts(weekend: bool) -> frozenset[ShiftType]:
    return WEEKEND_SHIFTS if weekend else WEEKDAY_SHIFTS


def default_shift(admission_date: date | datetime, tz: str | None = None) -> ShiftType:
    """Morning shift of the matching vocabulary."""
    if is_weekend(admission_date, tz):
        return ShiftType.WEEKEND_MORNING
    return ShiftType.MORNING
