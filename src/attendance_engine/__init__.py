"""Attendance & time-balance engine.

Organized by feature modules (punches, schedules, attendance, balances,
metrics, ...) with Protocol repositories at the storage seams, pure
service logic in between and a thin Flask controller on top.
"""
