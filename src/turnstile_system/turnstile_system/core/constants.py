"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date, time

VALID_DEVICE_IDS = (1, 2)

DEFAULT_MAX_UPLOAD_MB = 10
EXCEL_EXTENSIONS = (".xlsx",)

# Meal-period boundaries shared by both policies.
BREAKFAST_END = time(10, 40)
DINNER_START = time(18, 0)
SINGLE_DEVICE_LUNCH_END = time(14, 0)
CONSOLIDATED_LUNCH_END = time(17, 50)

# Spreadsheet serial days: serial N is SERIAL_EPOCH + (N - 2) days.
SERIAL_EPOCH = date(1900, 1, 1)
SERIAL_OFFSET_DAYS = 2

# Sheet layout of the device exports: header is on the 4th row.
SHEET_HEADER_ROW = 3
SHEET_NAME_COLUMN = "NOME"
SHEET_DATE_COLUMN = "DATA"
SHEET_TIME_COLUMN = "HORA"

OBS_ONLY_ENTRY = "only entry recorded"
OBS_ONLY_EXIT = "only exit recorded"
OBS_DIFFERENT_DEVICES = "entrada e saída em catracas diferentes"

SOURCE_LABEL_SEPARATOR = "; "

# request paths recorded in auth_access_logs
ACCESS_LOG_PREFIXES = ("/api/auth", "/api/admin", "/api/registros")
DEFAULT_ACCESS_LOG_LIMIT = 100
MAX_ACCESS_LOG_LIMIT = 1000
