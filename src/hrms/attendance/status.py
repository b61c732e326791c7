from __future__ import annotations

from ..core.constants import FULL_DAY_MIN_HOURS
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


def status_for(record: AttendanceRecord) -> AttendanceStatus:
    """Derive a day's status from its check-in/check-out timestamps.

    Admin overrides and LEAVE days are returned unchanged. A check-in without
    a check-out is reported as HALF_DAY, the same label used for a completed
    day shorter than FULL_DAY_MIN_HOURS.
    """

    if record.is_overridden or record.status == AttendanceStatus.LEAVE:
        return record.status

    if record.check_in_time is None:
        return AttendanceStatus.ABSENT
    if record.check_out_time is None:
        return AttendanceStatus.HALF_DAY

    hours = record.duration_hours or 0.0
    if hours < FULL_DAY_MIN_HOURS:
        return AttendanceStatus.HALF_DAY
    return AttendanceStatus.PRESENT
