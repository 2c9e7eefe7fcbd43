import os


class Settings:
    def __init__(self):
        self.app_name = "Booking Economics"
        self.api_version = "1.0.0"
        self.environment = os.getenv("ECONOMICS_ENVIRONMENT", "development")
        self.default_currency = os.getenv("ECONOMICS_CURRENCY", "EUR")
        self.log_level = os.getenv("ECONOMICS_LOG_LEVEL", "INFO").upper()
        # Progress bar colours keyed by segment kind
        self.status_colors = {
            "completed": "#22c55e",
            "scheduled": "#6b7280",
            "resting": "#a855f7",
            "uncompleted": "#fbbf24",
            "cancelled": "#ef4444",
            "remainder": "#e5e7eb",
        }


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
