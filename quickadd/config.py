import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    vikunja_url: str = ""
    vikunja_token: str = ""
    vikunja_default_project: str = "1"  # id or project name
    quickadd_timezone: str = "UTC"
    http_timeout: float = 10.0
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", case_sensitive=False)

    @property
    def has_vikunja(self) -> bool:
        return bool(self.vikunja_url and self.vikunja_token)


settings = Settings()


def setup_logging() -> None:
    """Root logging for the entry points (CLI and server startup)."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
