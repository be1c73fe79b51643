"""Library configuration using Pydantic Settings."""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedcanon import __version__


class Settings(BaseSettings):
    """Library settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # HTTP client
    user_agent: str = Field(
        default=f"feedcanon/{__version__} (+https://pypi.org/project/feedcanon/)",
        alias="FEEDCANON_USER_AGENT",
    )
    fetch_timeout: float = Field(default=15.0, alias="FEEDCANON_FETCH_TIMEOUT")
    max_redirects: int = Field(default=10, alias="FEEDCANON_MAX_REDIRECTS")

    # Resolution
    default_scheme: str = Field(default="https", alias="FEEDCANON_DEFAULT_SCHEME")

    # Canonicalization
    extra_stripped_params: str = Field(default="", alias="FEEDCANON_STRIPPED_PARAMS")
    canonicalize_timeout: float = Field(default=0.0, alias="FEEDCANON_CANONICALIZE_TIMEOUT")  # 0 disables

    # Observability
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    @property
    def extra_stripped_params_list(self) -> List[str]:
        """Get list of additional query parameters to strip."""
        return [p.strip() for p in self.extra_stripped_params.split(",") if p.strip()]

    @property
    def stripped_params(self) -> List[str]:
        """Get the full list of tracking parameters to strip (defaults plus extras)."""
        from feedcanon.core.defaults import DEFAULT_STRIPPED_PARAMS

        params = list(DEFAULT_STRIPPED_PARAMS)
        for name in self.extra_stripped_params_list:
            if name.lower() not in params:
                params.append(name.lower())
        return params


settings = Settings()
