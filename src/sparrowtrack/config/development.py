import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# "json" keeps records in RECORDS_PATH, "memory" forgets them on restart
RECORD_STORE = os.getenv("RECORD_STORE", "json")
RECORDS_PATH = os.getenv("RECORDS_PATH", "data/attendance.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True
