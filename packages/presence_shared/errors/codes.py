"""Machine-readable error codes reported by the presence HTTP boundary."""

# Caller input
INVALID_ARGUMENT = "INVALID_ARGUMENT"
UNKNOWN_GROUP = "UNKNOWN_GROUP"

# Access-control backend
UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
UPSTREAM_REJECTED = "UPSTREAM_REJECTED"
UPSTREAM_MALFORMED = "UPSTREAM_MALFORMED"

# Durable snapshot
SNAPSHOT_UNAVAILABLE = "SNAPSHOT_UNAVAILABLE"

# Everything else
INTERNAL_ERROR = "INTERNAL_ERROR"
UNEXPECTED_EXCEPTION = "UNEXPECTED_EXCEPTION"
