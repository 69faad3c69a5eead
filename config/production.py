import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

DATA_SOURCE = os.getenv("DATA_SOURCE", "http")
ATTENDANCE_API_URL = os.getenv("ATTENDANCE_API_URL", "http://localhost:5000/api")
SUBMIT_TIMEOUT_SECONDS = float(os.getenv("SUBMIT_TIMEOUT_SECONDS", "30"))

LOCATION_PROVIDER = os.getenv("LOCATION_PROVIDER", "none")
LOCATION_TIMEOUT_SECONDS = float(os.getenv("LOCATION_TIMEOUT_SECONDS", "5"))
SITE_LATITUDE = float(os.environ["SITE_LATITUDE"]) if os.getenv("SITE_LATITUDE") else None
SITE_LONGITUDE = float(os.environ["SITE_LONGITUDE"]) if os.getenv("SITE_LONGITUDE") else None
IP_GEOLOCATION_URL = os.getenv("IP_GEOLOCATION_URL", "http://ip-api.com/json/")

SYNC_WARNING_THRESHOLD = int(os.getenv("SYNC_WARNING_THRESHOLD", "3"))
CLOCK_MAX_RETRIES = int(os.environ["CLOCK_MAX_RETRIES"]) if os.getenv("CLOCK_MAX_RETRIES") else None

COMPANY_ID = os.getenv("COMPANY_ID", "JAHAZII_COMPANY")
QR_EXPIRES_IN = int(os.getenv("QR_EXPIRES_IN", "30"))
WORK_START_HOUR = int(os.getenv("WORK_START_HOUR", "8"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))
