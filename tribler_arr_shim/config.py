"""
Configuration management for tribler-arr-shim.

Settings are read once from the environment (and an optional ``.env`` file).
Components never look at the environment themselves; they receive a
``TriblerConfig`` value object at construction time.
"""
from typing import Optional
from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings

from tribler_arr_shim import __version__
from tribler_arr_shim.constants import DEFAULT_ANON_HOPS, TRIBLER_TIMEOUT_SECONDS


class TriblerConfig(BaseModel):
    """Everything the Engine Client and the State Mapper need to know."""
    api_endpoint: str = Field("", description="Base URL of the Tribler REST API, e.g. http://tribler:20100")
    api_key: str = Field("", description="Tribler API key sent as X-Api-Key")
    download_dir: str = Field("", description="Destination directory for new downloads")
    anon_hops: int = Field(DEFAULT_ANON_HOPS, ge=0, le=3, description="Anonymity hops for new downloads")
    safe_seeding: bool = Field(True, description="Seed through anonymity hops only")
    tls_skip_verify: bool = Field(False, description="Disable TLS certificate verification (opt-in)")
    timeout: float = Field(TRIBLER_TIMEOUT_SECONDS, gt=0, description="Total timeout per request in seconds")
    default_category: str = Field("tribler", description="Category for torrents with no local association")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env file."""

    # Application
    app_name: str = "tribler-arr-shim"
    app_version: str = __version__
    debug: bool = False

    # Server
    host: str = Field("0.0.0.0", validation_alias=AliasChoices("host", "tribler_arr_shim_addr"))
    port: int = Field(8091, validation_alias=AliasChoices("port", "tribler_arr_shim_port"))

    # Database (SQLite, one file next to the service)
    sqlite_path: str = "tribler-arr-shim.db"
    database_url: Optional[str] = Field(None, description="Full SQLAlchemy URL, overrides sqlite_path")

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    # Tribler
    tribler_api_endpoint: str = ""
    tribler_api_key: str = ""
    tribler_download_dir: str = ""
    tribler_anon_hops: int = DEFAULT_ANON_HOPS
    tribler_safe_seeding: bool = True
    tribler_timeout: float = TRIBLER_TIMEOUT_SECONDS
    tls_skip_verify: bool = False

    # Categories
    default_category: str = "tribler"
    reconcile_on_startup: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True

    def get_database_url(self) -> str:
        """SQLAlchemy URL, built from sqlite_path unless database_url is set."""
        if self.database_url:
            return self.database_url
        return f"sqlite+aiosqlite:///{self.sqlite_path}"

    def tribler_config(self) -> TriblerConfig:
        """Snapshot the Tribler-facing settings into a value object."""
        return TriblerConfig(
            api_endpoint=self.tribler_api_endpoint,
            api_key=self.tribler_api_key,
            download_dir=self.tribler_download_dir,
            anon_hops=self.tribler_anon_hops,
            safe_seeding=self.tribler_safe_seeding,
            tls_skip_verify=self.tls_skip_verify,
            timeout=self.tribler_timeout,
            default_category=self.default_category,
        )


# Global settings instance
settings = Settings()
