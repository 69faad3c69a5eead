SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

DATA_SOURCE = "mock"
ATTENDANCE_API_URL = "http://attendance.test/api"
SUBMIT_TIMEOUT_SECONDS = 1.0

LOCATION_PROVIDER = "none"
LOCATION_TIMEOUT_SECONDS = 0.5
SITE_LATITUDE = None
SITE_LONGITUDE = None
IP_GEOLOCATION_URL = "http://geo.test/json/"

SYNC_WARNING_THRESHOLD = 3
CLOCK_MAX_RETRIES = None

COMPANY_ID = "TEST_COMPANY"
QR_EXPIRES_IN = 30
WORK_START_HOUR = 8

LOG_LEVEL = "WARNING"
LOG_JSON = False
