"""School Attendance package.

Organized by feature modules (users, classes, attendance, notices, reports)
with a thin Flask controller layer over service/repository layers. Every
permission decision goes through :mod:`school_attendance.access.policy`.
"""
