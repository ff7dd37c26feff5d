"""Protocol-wide constants shared by both peers."""

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogatepass"  # rotated code points may land in the surrogate range
LINE_TERMINATOR = b"\n"

END_SENTINEL = "(end)"
SENTINEL_ESCAPE = "\\"
ROTATION_KEY = 10

LINE_MODULUS = 0x110000
BYTE_MODULUS = 256

LENGTH_PREFIX_FORMAT = "!q"  # signed 64-bit big-endian, non-negative in practice
FILE_CHUNK_SIZE = 64 * 1024

DEFAULT_LOCAL_NAME = "You"
UNKNOWN_NAME = "???"
ERROR_MARKER = "~*Syntax Error*~"
FALLBACK_FILENAME = "file"

YOUR_COLOR = "\u001b[45m"  # magenta background
ITS_COLOR = "\u001b[44m"  # blue background
RESET_COLOR = "\u001b[0m"
BUSY_QUALIFIER = " (Busy)"

WELCOME_LINE = "Welcome! What would you like to do?"
FAREWELL_LINE = "Bye!"

__all__ = [
    "ENCODING",
    "ENCODING_ERRORS",
    "LINE_TERMINATOR",
    "END_SENTINEL",
    "SENTINEL_ESCAPE",
    "ROTATION_KEY",
    "LINE_MODULUS",
    "BYTE_MODULUS",
    "LENGTH_PREFIX_FORMAT",
    "FILE_CHUNK_SIZE",
    "DEFAULT_LOCAL_NAME",
    "UNKNOWN_NAME",
    "ERROR_MARKER",
    "FALLBACK_FILENAME",
    "YOUR_COLOR",
    "ITS_COLOR",
    "RESET_COLOR",
    "BUSY_QUALIFIER",
    "WELCOME_LINE",
    "FAREWELL_LINE",
]
