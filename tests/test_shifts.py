from datetime import date, datetime, timezone

import pytest

from patientdesk.domain.shifts import (
    WEEKDAY_FORBIDS_WEEKEND_SHIFT,
    WEEKEND_REQUIRES_WEEKEND_SHIFT,
    ShiftType,
    allowed_shifts,
    classify_admission,
    default_shift,
    is_weekend,
    validate_shift_type,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2024, 6, 6), False),  # Thursday
        (date(2024, 6, 7), True),  # Friday
        (date(2024, 6, 8), True),  # Saturday
        (date(2024, 6, 9), False),  # Sunday
        (date(2024, 6, 10), False),  # Monday
    ],
)
def test_is_weekend_friday_and_saturday_only(value, expected):
    assert is_weekend(value) is expected


def test_is_weekend_uses_hospital_timezone_for_aware_datetimes():
    # Thursday 22:00 UTC is already Friday in Riyadh (UTC+3)
    late_thursday = datetime(2024, 6, 6, 22, 0, tzinfo=timezone.utc)

    assert is_weekend(late_thursday) is False
    assert is_weekend(late_thursday, "Asia/Riyadh") is True


def test_weekend_rejects_weekday_shift():
    check = classify_admission(datetime(2024, 6, 7, 10, 0), ShiftType.MORNING)

    assert check.ok is False
    assert check.is_weekend is True
    assert check.reason == WEEKEND_REQUIRES_WEEKEND_SHIFT


def test_weekday_rejects_weekend_shift():
    check = classify_admission(datetime(2024, 6, 10, 9, 0), "weekend_night")

    assert check.ok is False
    assert check.is_weekend is False
    assert check.reason == WEEKDAY_FORBIDS_WEEKEND_SHIFT


@pytest.mark.parametrize("shift", ["weekend_morning", "weekend_night"])
def test_weekend_accepts_weekend_shifts(shift):
    check = classify_admission(date(2024, 6, 8), shift)

    assert check.ok is True
    assert check.is_weekend is True
    assert check.shift_type == ShiftType(shift)
    assert check.reason is None


@pytest.mark.parametrize("shift", ["morning", "evening", "night"])
def test_weekday_accepts_weekday_shifts(shift):
    assert classify_admission(date(2024, 6, 10), shift).ok is True


def test_validate_shift_type_rejects_unknown_label():
    with pytest.raises(ValueError):
        validate_shift_type(False, "afternoon")


def test_allowed_and_default_shifts():
    assert allowed_shifts(True) == {ShiftType.WEEKEND_MORNING, ShiftType.WEEKEND_NIGHT}
    assert allowed_shifts(False) == {ShiftType.MORNING, ShiftType.EVENING, ShiftType.NIGHT}
    assert default_shift(date(2024, 6, 7)) == ShiftType.WEEKEND_MORNING
    assert default_shift(date(2024, 6, 10)) == ShiftType.MORNING
