"""Constants for the REST back-end integration."""

# Default time to wait for connecting to and getting a response from the back-end
DEFAULT_TIMEOUT_MS = 10_000

# Paths relative to the back-end base URL
DELIVER_PATH = "deliver"
NOTIFY_RECEIPT_PATH = "notify/receipt"
NOTIFY_ERROR_PATH = "notify/error"

# Names of the delivery method parameters
P_BACKEND_URL = "URL"
P_TIMEOUT = "TIMEOUT"

# Read size used when streaming payload content to the back-end
PAYLOAD_CHUNK_SIZE = 64 * 1024
