"""Gateway-level constants shared across modules."""
from __future__ import annotations


class HealthStatus:
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class DatabaseStatus:
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


# Error codes that mean the server dropped the session rather than rejected the SQL:
# a reset socket and PostgreSQL's admin_shutdown (57P01).
CONNECTION_RESET_CODE = "ECONNRESET"
ADMIN_SHUTDOWN_CODE = "57P01"
TRANSIENT_CONNECTION_CODES = frozenset({CONNECTION_RESET_CODE, ADMIN_SHUTDOWN_CODE})

LIVENESS_QUERY = "SELECT 1"

DATABASE_NOT_CONNECTED_MESSAGE = "Database not connected"
QUERY_TEXT_REQUIRED_MESSAGE = "Query text is required"
