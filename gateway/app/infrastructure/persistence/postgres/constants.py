from enum import Enum


class ConnectionState(str, Enum):
    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"


# Raised by the extended protocol for "SELECT 1; SELECT 2"; the simple protocol accepts it.
SYNTAX_ERROR_SQLSTATE = "42601"
MULTIPLE_COMMANDS_MESSAGE = "cannot insert multiple commands into a prepared statement"
