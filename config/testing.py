import os

from .config import Config

SECRET_KEY = "test-secret"
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_test"),
}

TIME_ZONE = "Europe/Madrid"
REMINDER_LEAD_MINUTES = 5
REMINDER_LOOKBACK_MINUTES = 65

VAPID_PUBLIC_KEY = ""
VAPID_PRIVATE_KEY = ""
VAPID_SUBJECT = Config.VAPID_SUBJECT
CRON_SECRET = "test-cron-secret"

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "test-admin"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
ENABLE_SCHEDULER = False
