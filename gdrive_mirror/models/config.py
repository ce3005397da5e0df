"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

DRIVE_READONLY_SCOPE = "https://www.googleapis.com/auth/drive.readonly"

DEFAULT_MAX_WORKERS = 10
DEFAULT_CREDENTIALS_FILE = "~/.credentials.json"
DEFAULT_TOKEN_FILE = "token.json"
DEFAULT_OUTPUT_DIR = "."


class MirrorConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Authentication
    credentials_file: str = DEFAULT_CREDENTIALS_FILE
    token_file: str = DEFAULT_TOKEN_FILE

    # Mirror Settings
    max_workers: int = DEFAULT_MAX_WORKERS
    output_dir: str = DEFAULT_OUTPUT_DIR
    request_timeout: float = 60.0

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    @field_validator("max_workers")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        """Ensures a reasonable number of workers."""
        if v < 1 or v > 64:
            raise ValueError("Max workers must be between 1 and 64.")
        return v

    @field_validator("credentials_file", "token_file", "output_dir")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v:
            raise ValueError("Path settings cannot be empty.")
        return v

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Request timeout must be a positive number of seconds.")
        return v

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
