import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "schoolflow_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

INVOICE_DUE_DAYS = int(os.getenv("INVOICE_DUE_DAYS", "10"))
INVOICE_NUMBER_START = int(os.getenv("INVOICE_NUMBER_START", "1000"))
ALLOW_PAID_SLIP_DELETION = bool(int(os.getenv("ALLOW_PAID_SLIP_DELETION", "1")))
