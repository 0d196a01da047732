from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from dbwiring.models import DEFAULT_URL, ConnectionConfig, DataSourceKindEnum


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Use top level .env file (one level above ./dbwiring/)
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )
    PROJECT_NAME: str = "dbwiring"
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    DATASOURCE_KIND: DataSourceKindEnum = DataSourceKindEnum.POOLED
    # DB-API module name; empty = inferred from DB_URL
    DB_DRIVER: str = ""
    DB_URL: str = DEFAULT_URL
    DB_USERNAME: str = "sa"
    DB_PASSWORD: str = ""

    DB_POOL_MAX_ACTIVE: int = 5
    DB_POOL_IDLE_TIMEOUT_MS: int | None = 30000
    DB_POOL_MAX_WAIT_MS: int = 30000
    DB_POOL_INITIAL_SIZE: int = 1
    DB_CONNECT_TIMEOUT: int = 10

    # Create the employee table (and a `dual` view where needed) at startup
    DB_INIT_SCHEMA: bool = True

    def connection_config(self) -> ConnectionConfig:
        return ConnectionConfig(
            kind=self.DATASOURCE_KIND,
            driver=self.DB_DRIVER,
            url=self.DB_URL,
            username=self.DB_USERNAME,
            password=self.DB_PASSWORD,
            max_active=self.DB_POOL_MAX_ACTIVE,
            idle_timeout_ms=self.DB_POOL_IDLE_TIMEOUT_MS,
            max_wait_ms=self.DB_POOL_MAX_WAIT_MS,
            initial_size=self.DB_POOL_INITIAL_SIZE,
            connect_timeout=self.DB_CONNECT_TIMEOUT,
        )


settings = Settings()  # type: ignore
