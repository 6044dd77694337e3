BASE_URL = "https://assessment.ksensetech.com/api"

PAGE_LIMIT = 10
REQUEST_TIMEOUT = 30  # seconds

# retries on top of the first attempt
MAX_RETRIES = 5
RETRYABLE_STATUSES = frozenset({429, 500, 502, 503})
BASE_DELAY_MS = 1000
MAX_DELAY_MS = 10000
JITTER_MS = 300

HIGH_RISK_THRESHOLD = 4
FEVER_THRESHOLD = 99.6
