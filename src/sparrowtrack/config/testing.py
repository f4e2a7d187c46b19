SECRET_KEY = "test-secret"

RECORD_STORE = "memory"
RECORDS_PATH = ""

LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True
