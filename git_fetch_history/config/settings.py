from functools import lru_cache

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Service settings loaded from environment variables.

    REPO and BRANCH identify the single repository/branch pair this process
    tracks and have no defaults. Everything else can be left alone in the
    standard deployment, where a `.env` file or the container environment
    provides the values.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Tracked repository
    REPO: str
    BRANCH: str
    REPO_URL_TEMPLATE: str = "git@bitbucket.org:synthesis_admin/{repo}.git"
    LOCAL_ROOT: str = "/tmp/repo"

    # Credentials
    SSH_KEY_PATH: str = "./temp"
    SSH_IDENTITY: str = ""
    GIT_TOKEN: str = ""  # For private HTTPS repositories

    # Record sink
    SINK_BACKEND: str = "s3"  # "s3" or "local"
    AWS_REGION: str = "eu-west-1"
    AWS_BUCKET: str = "git-fetch-history"
    LOCAL_SINK_PATH: str = "./records"

    # Timing, in seconds
    POLL_INTERVAL_SECONDS: float = 300
    STARTUP_DELAY_SECONDS: float = 30
    FATAL_GRACE_SECONDS: float = 300

    # Max commits walked when the previous head is not found after a pull
    SYNC_MAX_WALK: int = 1000

    LOG_LEVEL: str = "INFO"

    @field_validator("REPO", "BRANCH")
    @classmethod
    def _require_identifier(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value.strip()

    @field_validator("SINK_BACKEND")
    @classmethod
    def _known_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in ("s3", "local"):
            raise ValueError(f"unknown sink backend {value!r}")
        return value

    @property
    def repo_url(self) -> str:
        return self.REPO_URL_TEMPLATE.format(repo=self.REPO)


def load_settings() -> Settings:
    """Build settings, turning validation failures into a ConfigurationError."""
    try:
        return Settings()
    except ValidationError as e:
        missing = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
        raise ConfigurationError(
            f"Invalid configuration for {', '.join(missing)}: {e}"
        ) from e


@lru_cache
def get_settings() -> Settings:
    return load_settings()
