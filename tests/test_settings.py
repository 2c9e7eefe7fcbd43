from backend.economics.core.settings import get_settings


def test_settings_defaults():
    settings = get_settings()
    assert settings.app_name == "Booking Economics"
    assert settings.environment == "development"
    assert settings.default_currency == "EUR"
    assert settings.log_level == "INFO"


def test_status_colors_cover_every_segment():
    colors = get_settings().status_colors
    assert set(colors) == {"completed", "scheduled", "resting", "uncompleted", "cancelled", "remainder"}
    assert all(value.startswith("#") and len(value) == 7 for value in colors.values())
