from wizeprompt.config import Settings


def make_test_settings(**overrides) -> Settings:
    """Settings that ignore the developer's .env file."""
    values = {"ENV": "testing", "TESTING": True, "LOG_TO_STDOUT": True, "LOG_FORMAT": "json"}
    values.update(overrides)
    return Settings(_env_file=None, **values)
