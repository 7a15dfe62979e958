from pydantic_settings import BaseSettings
from pydantic_settings import PydanticBaseSettingsSource
from pydantic_settings import SettingsConfigDict
from pydantic_settings import TomlConfigSettingsSource


class Settings(BaseSettings):
    """Application settings.

    Values are read from init kwargs, process environment, `.env` and
    finally an optional `config.toml` in the working directory. Anything not
    set falls back to the defaults below.
    """

    port: int = 7800
    username: str = "mn6"
    allowed_origins: list[str] = ["*"]
    expire: int = 43200
    allowed_users: str = "|xaanit|mn6|"
    allow_user_query: bool = True

    github_base_url: str = "https://github.com"
    fetch_timeout_seconds: float = 10.0
    database_url: str = "sqlite+pysqlite:///./commitscrape.db"

    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1

    model_config = SettingsConfigDict(
        env_prefix="COMMITSCRAPE_",
        env_file=".env",
        toml_file="config.toml",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            TomlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    def is_user_allowed(self, username: str) -> bool:
        """Check membership in the pipe-delimited allow-list, e.g. `|a|b|`."""

        if not username or "|" in username:
            return False
        return username in {name for name in self.allowed_users.split("|") if name}
