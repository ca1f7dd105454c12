import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    API_URL: str = "http://localhost:5000/api"
    REQUEST_TIMEOUT: float = 30.0

    PAGE_SIZE: int = 10
    RESET_PAGE_ON_QUERY_CHANGE: bool = True

    SESSION_FILE: str = "~/.employee_console/session.json"

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
