SDK_NAME = "tracewire.python"
VERSION = "0.1.0"

ENVELOPE_CONTENT_TYPE = "application/x-tracewire-envelope"

DEFAULT_FLUSH_TIMEOUT_MILLIS = 15000
DEFAULT_SHUTDOWN_TIMEOUT_MILLIS = 2000
DEFAULT_MAX_QUEUE_SIZE = 100
