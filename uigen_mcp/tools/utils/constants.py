# Default for ServiceConfig.MAX_RESPONSE_LEN: characters returned to the model in one tool result
MAX_RESPONSE_LEN: int = 16000

TRUNCATED_MESSAGE: str = (
    "<response clipped><NOTE>To save on context only part of this file has been shown to you. "
    "Use `view` with a `view_range` to see the rest of the file.</NOTE>"
)

# Default for ServiceConfig.SNIPPET_LINES: lines of context shown around an edit
SNIPPET_LINES: int = 4
