import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = Config.db_config()

TIME_ZONE = Config.TIME_ZONE
REMINDER_LEAD_MINUTES = Config.REMINDER_LEAD_MINUTES
REMINDER_LOOKBACK_MINUTES = Config.REMINDER_LOOKBACK_MINUTES

VAPID_PUBLIC_KEY = Config.VAPID_PUBLIC_KEY
VAPID_PRIVATE_KEY = Config.VAPID_PRIVATE_KEY
VAPID_SUBJECT = Config.VAPID_SUBJECT
CRON_SECRET = Config.CRON_SECRET

ADMIN_USERNAME = Config.ADMIN_USERNAME
ADMIN_PASSWORD = Config.ADMIN_PASSWORD

LOG_LEVEL = Config.LOG_LEVEL
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
ENABLE_SCHEDULER = bool(int(os.getenv("ENABLE_SCHEDULER", "0")))
