import os


def get_settings_module() -> str:
    # Settings are selected by APP_ENV, defaulting to development.
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "hrms.config.production"

    if env in {"test", "testing"}:
        return "hrms.config.testing"

    return "hrms.config.development"
