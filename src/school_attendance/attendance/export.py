from __future__ import annotations

import csv
import io
from typing import Iterable

from .model import AttendanceRecord

CSV_HEADER = ["Date", "Student ID", "Student Name", "Class", "Status", "Subject", "Marked By"]


def export_sort_key(r: AttendanceRecord):
    # date desc, then class and student name asc
    return (-r.date.toordinal(), r.class_name, r.student_name)


def records_to_csv(records: Iterable[AttendanceRecord]) -> str:
    """Render records as CSV; fields containing commas or quotes are quoted."""

    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for r in records:
        writer.writerow(
            [
                r.date.strftime("%Y-%m-%d"),
                r.student_id,
                r.student_name,
                r.class_name,
                r.status.value,
                r.subject or "",
                r.marked_by,
            ]
        )
    return out.getvalue()
