# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Keep your .env local (gitignored); nothing here is imported by the app.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "TODO_APP_NAME": "App display name (default: modern-todo).",
    "TODO_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Connectors
    "TODO_CONSOLE_ENABLED": "Run the interactive console (true/false, default true).",
    # Reminders
    "TODO_REMINDERS_ENABLED": "Deliver due-date reminders (true/false, default true).",
    "TODO_REMINDER_INTERVAL_SECONDS": "How often the reminder loop checks for due tasks (default 15).",
    "TODO_REMINDER_RETRY_SECONDS": "Delay before re-delivering a reminder that failed (default 60).",
    # Categories
    "TODO_CATEGORIES": "Comma separated built-in categories (default: Personal,Work,Shopping,Health,Other).",
    "TODO_DEFAULT_CATEGORY": "Category for new tasks and for tasks of removed categories (default: Personal).",
    # Local data paths
    "TODO_DATA_DIR": "Local data dir (default: .local/todo).",
    "TODO_PREFS_DB_PATH": "SQLite preference DB (default: <data_dir>/prefs.sqlite3).",
    "TODO_LOG_DIR": "Directory for todo.log (default: <data_dir>).",
}
