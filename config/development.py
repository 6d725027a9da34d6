import json
import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Company-local time: fixed offset, and the hour the working day closes.
TIMEZONE_OFFSET = os.getenv("TIMEZONE_OFFSET", "+05:00")
COMPANY_DAY_CUTOFF = os.getenv("COMPANY_DAY_CUTOFF", "08:55")

LEAVES_PER_QUARTER = int(os.getenv("LEAVES_PER_QUARTER", "6"))

# On Saturdays, shift N2 works N1's hours.
SATURDAY_SHIFT_OVERRIDES = json.loads(os.getenv("SATURDAY_SHIFT_OVERRIDES", '{"N2": "N1"}'))

# Department name -> "all_off" | "alternate". Unlisted departments alternate.
DEPARTMENT_SATURDAY_POLICY = json.loads(os.getenv("DEPARTMENT_SATURDAY_POLICY", "{}"))

SHIFT_CACHE_TTL_SECONDS = int(os.getenv("SHIFT_CACHE_TTL_SECONDS", "300"))
PAYROLL_MAX_WORKERS = int(os.getenv("PAYROLL_MAX_WORKERS", "1"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also load default shifts on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
