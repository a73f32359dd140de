"""
Shared constants.

This module has no dependencies on models or services to avoid circular imports.
"""

# Program capacity bounds (total_weeks)
MIN_TOTAL_WEEKS = 1
MAX_TOTAL_WEEKS = 52

# Fixed weekly calendar: a week never holds more than seven days
MAX_DAYS_PER_WEEK = 7

# Suffix appended to the name of a duplicated week or day
COPY_SUFFIX = " (Copy)"

# Maximum length for week, day, program and exercise names
MAX_NAME_LENGTH = 255

# Storage table names
PROGRAMS_TABLE = "programs"
WEEKS_TABLE = "program_weeks"
DAYS_TABLE = "program_days"
ASSIGNMENTS_TABLE = "program_day_exercises"
EXERCISES_TABLE = "exercises"
PROGRESS_LOGS_TABLE = "progress_logs"
