# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "ORANGEDUE_APP_NAME": "App display name (default: orangedue).",
    "ORANGEDUE_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "ORANGEDUE_DATA_DIR": "Local data directory, holds orangedue.log (default: .local/orangedue).",
    "ORANGEDUE_BACKUP_DIR": "Where /export writes when no path is given (default: <data_dir>/backups).",
    # Store
    "ORANGEDUE_SEED_DEFAULT_LIST": "Create the default list on startup (true/false, default: true).",
    "ORANGEDUE_DEFAULT_LIST_NAME": "Name of the seeded list (default: Default list).",
    "ORANGEDUE_DEFAULT_LIST_COLOR": "Color of the seeded list (default: #3b82f6).",
    # Reminders
    "ORANGEDUE_REMINDER_DEFAULT_BODY": "Alert body when a reminder has none (default: Task reminder).",
    "ORANGEDUE_UPCOMING_WINDOW_MINUTES": "Window used by /upcoming (default: 60).",
}
