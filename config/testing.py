import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_payroll_test"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

TIMEZONE_OFFSET = "+05:00"
COMPANY_DAY_CUTOFF = "08:55"
LEAVES_PER_QUARTER = 6
SATURDAY_SHIFT_OVERRIDES = {"N2": "N1"}
DEPARTMENT_SATURDAY_POLICY = {}
SHIFT_CACHE_TTL_SECONDS = 0
PAYROLL_MAX_WORKERS = 1

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
