"""Console to-do list with categories, search filters and due-date reminders."""

__version__ = "0.3.0"
