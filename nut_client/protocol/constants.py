"""Protocol constants for NUT (Network UPS Tools) upsd communication."""

# Connection parameters
DEFAULT_PORT = 3493
TIMEOUT = 5.0  # seconds for read timeout on the underlying stream
WRITE_TIMEOUT = 5.0

# Polling
POLL_INTERVAL = 5.0  # seconds between LIST VAR passes

# Line framing
LINE_TERMINATOR = b"\n"
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"  # bytes that are not UTF-8 round-trip unchanged
QUOTE = '"'

# Response markers (first token of a response line)
MARKER_OK = "OK"
MARKER_BEGIN = "BEGIN"
MARKER_END = "END"
MARKER_VAR = "VAR"
MARKER_UPS = "UPS"
MARKER_ERR = "ERR"

# Acknowledgement prefix that closes the login exchange (e.g. "OK LOGGED")
AUTH_ACK_PREFIX = "OK L"

# Error codes returned by upsd as "ERR <code> [detail]"
ERROR_DESCRIPTIONS = {
    "ACCESS-DENIED": "Access denied: bad credentials or host not allowed",
    "UNKNOWN-UPS": "UPS identifier not known to the server",
    "VAR-NOT-SUPPORTED": "Variable not supported by this UPS",
    "CMD-NOT-SUPPORTED": "Command not supported by this UPS",
    "INVALID-ARGUMENT": "Invalid argument",
    "INSTCMD-FAILED": "Instant command failed",
    "SET-FAILED": "Setting variable failed",
    "READONLY": "Variable is read-only",
    "TOO-LONG": "Value too long",
    "FEATURE-NOT-SUPPORTED": "Feature not supported by the server",
    "FEATURE-NOT-CONFIGURED": "Feature not configured on the server",
    "ALREADY-SSL-MODE": "Connection already in TLS mode",
    "DRIVER-NOT-CONNECTED": "upsd is not connected to the UPS driver",
    "DATA-STALE": "UPS data is stale",
    "ALREADY-LOGGED-IN": "Already logged in",
    "INVALID-PASSWORD": "Invalid password",
    "ALREADY-SET-PASSWORD": "Password already set",
    "INVALID-USERNAME": "Invalid username",
    "ALREADY-SET-USERNAME": "Username already set",
    "USERNAME-REQUIRED": "Username required",
    "PASSWORD-REQUIRED": "Password required",
    "UNKNOWN-COMMAND": "Unknown command",
    "INVALID-VALUE": "Invalid value",
}

# ups.status flag words
STATUS_FLAGS = {
    "OL": "On Line",
    "OB": "On Battery",
    "LB": "Low Battery",
    "HB": "High Battery",
    "RB": "Replace Battery",
    "CHRG": "Charging",
    "DISCHRG": "Discharging",
    "BYPASS": "Bypass",
    "CAL": "Runtime Calibration",
    "OFF": "Offline",
    "OVER": "Overloaded",
    "TRIM": "SmartTrim",
    "BOOST": "SmartBoost",
    "FSD": "Forced Shutdown",
}
