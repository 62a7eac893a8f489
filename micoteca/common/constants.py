"""Application constants."""

USER_AGENT = "micoteca/0.3 (+gruppo micologico; static dataset reader)"
COMMANDS = (
    "region",
    "search",
    "suggest",
    "calendar",
    "catalog",
)
DEFAULT_COORDINATES_FIELD = "localityCoordinates"
DEFAULT_RECORDS_KEY = "campioniRaccolti"
DEFAULT_AUTOCOMPLETE_LIMIT = 10
EXIT_SUCCESS = 0
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "command",
    "dataset",
    "event",
    "status",
    "rows_in",
    "rows_out",
    "skipped",
    "error_code",
    "message",
)
