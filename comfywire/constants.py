"""Wire-level constants shared across comfywire contracts."""

from __future__ import annotations

# Input-spec type tags with a dedicated variant. A custom tag may be any other
# string.
BUILTIN_INPUT_TYPES = frozenset({"INT", "FLOAT", "BOOLEAN", "STRING", "COMBO"})

# Tags allowed to arrive as a bare value (``"INT"`` instead of ``["INT", {}]``).
UPCAST_INPUT_TYPES = frozenset({"INT", "FLOAT", "BOOLEAN", "STRING"})

EXECUTION_START = "execution_start"
EXECUTION_SUCCESS = "execution_success"
EXECUTION_CACHED = "execution_cached"
EXECUTION_INTERRUPTED = "execution_interrupted"
EXECUTION_ERROR = "execution_error"

EXECUTION_EVENT_TYPES = (
    EXECUTION_START,
    EXECUTION_SUCCESS,
    EXECUTION_CACHED,
    EXECUTION_INTERRUPTED,
    EXECUTION_ERROR,
)

TERMINAL_EVENT_TYPES = frozenset(
    {EXECUTION_SUCCESS, EXECUTION_ERROR, EXECUTION_INTERRUPTED}
)

DEFAULT_PAYLOAD_PREVIEW_CHARS = 2000
