"""Structured log keys used by presence components."""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"
EVENT = "event"

# public_api_logged
COMPONENT_ID = "component_id"
API_NAME = "api_name"
PUBLIC_API_INVOCATION_EVENT = "public_api_invocation"
PUBLIC_API_COMPLETION_EVENT = "public_api_completion"
SUCCESS = "success"
DURATION_MS = "duration_ms"
ERRORS = "errors"

# refresh cycles
REFRESH_CYCLE = "refresh_cycle"
PERSON_ID = "person_id"

# process identity, seeded once by configure_logging
SERVICE = "service"
ENVIRONMENT = "environment"
