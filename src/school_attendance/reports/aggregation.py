"""Turns raw ledger rows into attendance statistics.

All functions are pure and expect rows that were already access filtered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from ..core.enums import AttendanceStatus


class _HasStatus(Protocol):
    status: AttendanceStatus


def attendance_percentage(present_days: int, total_days: int) -> float:
    """Share of present days in percent, rounded to 2 decimals; 0 for no days."""

    if total_days <= 0:
        return 0.0
    return round(present_days / total_days * 100, 2)


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    absent_days: int
    late_days: int
    attendance_percentage: float

    def to_dict(self) -> dict:
        return {
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "lateDays": self.late_days,
            "attendancePercentage": self.attendance_percentage,
        }


@dataclass(frozen=True)
class StudentSummary:
    student_id: str
    student_name: str
    class_name: str
    summary: AttendanceSummary

    def to_dict(self) -> dict:
        return {
            "studentId": self.student_id,
            "studentName": self.student_name,
            "class": self.class_name,
            **self.summary.to_dict(),
        }


def summarize(records: Iterable[_HasStatus]) -> AttendanceSummary:
    counts = {status: 0 for status in AttendanceStatus}
    for r in records:
        counts[r.status] += 1
    total = sum(counts.values())
    present = counts[AttendanceStatus.PRESENT]
    return AttendanceSummary(
        total_days=total,
        present_days=present,
        absent_days=counts[AttendanceStatus.ABSENT],
        late_days=counts[AttendanceStatus.LATE],
        attendance_percentage=attendance_percentage(present, total),
    )


def summarize_by_student(records: Iterable) -> list[StudentSummary]:
    """One summary row per student, sorted by student name then id.

    Name and class come from the first row seen for the student, so callers
    passing reverse chronological rows get the latest snapshot.
    """

    grouped: dict[str, list] = {}
    first_seen: dict[str, object] = {}
    for r in records:
        grouped.setdefault(r.student_id, []).append(r)
        first_seen.setdefault(r.student_id, r)

    out = [
        StudentSummary(
            student_id=student_id,
            student_name=first_seen[student_id].student_name,
            class_name=first_seen[student_id].class_name,
            summary=summarize(rows),
        )
        for student_id, rows in grouped.items()
    ]
    out.sort(key=lambda s: (s.student_name, s.student_id))
    return out


def summarize_by_status(records: Sequence[_HasStatus]) -> dict:
    """Class level breakdown keyed by status literal."""

    summary = summarize(records)
    return {
        AttendanceStatus.ABSENT.value: summary.absent_days,
        AttendanceStatus.LATE.value: summary.late_days,
        AttendanceStatus.PRESENT.value: summary.present_days,
        "total": summary.total_days,
        "attendancePercentage": summary.attendance_percentage,
    }
