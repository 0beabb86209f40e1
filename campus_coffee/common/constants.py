"""Application constants."""

USER_AGENT = "CampusCoffee/1.0"
OSM_API_BASE_URL = "https://api.openstreetmap.org/api/0.6"
CONFIG_FILENAME = "campus_coffee.yml"
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "run_id",
    "command",
    "node_id",
    "pos_id",
    "event",
    "status",
    "error_code",
    "message",
)
