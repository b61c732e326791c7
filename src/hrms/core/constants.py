"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Worked hours at or above this count as a full PRESENT day.
FULL_DAY_MIN_HOURS = 4.0

SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 6

LEAVE_ENTITY = "Leave"
ATTENDANCE_ENTITY = "Attendance"
EMPLOYEE_ENTITY = "Employee"
PAYROLL_ENTITY = "Payroll"
USER_ENTITY = "User"

AUDITED_ENTITIES = (LEAVE_ENTITY, ATTENDANCE_ENTITY, EMPLOYEE_ENTITY, PAYROLL_ENTITY, USER_ENTITY)
