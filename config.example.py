# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit a .env with production URLs. This file exists to make the repo self-documenting
even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "SUPERVISION_APP_NAME": "App display name (default: supervision).",
    "SUPERVISION_LOG_LEVEL": "Console logging level (default: INFO).",
    # Remote store
    "SUPERVISION_API_BASE_URL": (
        "REST backend base URL, e.g. http://localhost:8000/api. Empty => local store only."
    ),
    "SUPERVISION_HTTP_TIMEOUT_SECONDS": "Per-request timeout for the remote store (default: 10).",
    # Paths (gitignored)
    "SUPERVISION_DATA_DIR": "Local data directory for logs and the fallback DB (default: .local/supervision).",
    "SUPERVISION_DB_PATH": "Fallback SQLite path (default: <data_dir>/supervision.sqlite3).",
}
