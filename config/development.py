import os

from .config import Config

SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = Config.db_config()

TIME_ZONE = Config.TIME_ZONE
REMINDER_LEAD_MINUTES = Config.REMINDER_LEAD_MINUTES
REMINDER_LOOKBACK_MINUTES = Config.REMINDER_LOOKBACK_MINUTES

VAPID_PUBLIC_KEY = Config.VAPID_PUBLIC_KEY
VAPID_PRIVATE_KEY = Config.VAPID_PRIVATE_KEY
VAPID_SUBJECT = Config.VAPID_SUBJECT
CRON_SECRET = Config.CRON_SECRET

ADMIN_USERNAME = Config.ADMIN_USERNAME
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG").upper()
DEBUG = True

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# In-process reminder checks; turn off when an external cron hits /api/cron/notifications
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "1")))
