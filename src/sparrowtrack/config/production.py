import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

RECORD_STORE = os.getenv("RECORD_STORE", "json")
RECORDS_PATH = os.getenv("RECORDS_PATH", "/var/lib/sparrowtrack/attendance.json")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

DEBUG = False
