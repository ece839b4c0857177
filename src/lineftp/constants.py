from __future__ import annotations

ENCODING = "utf-8"
NEWLINE = "\n"
MAX_LINE_BYTES = 64 * 1024

DEFAULT_TIMEOUT_S = 300.0
DEFAULT_HOST = "0.0.0.0"

PROMPT = "secFTP>"
ERROR_SENTINEL = -1
NOOP = ""

PUT_OK = "PUT OK"
PUT_FAILED = "PUT FAILED"

BYTE_MIN = -128  # signed-byte encodings are accepted on receive
BYTE_MAX = 255
