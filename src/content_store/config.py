"""Application configuration via environment variables."""

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service configuration loaded from environment variables."""

    model_config = {"env_prefix": ""}

    # Content
    content_dir: Path = Field(
        default=Path("posts"), description="Directory holding post Markdown files"
    )
    post_glob: str = Field(default="*.md", description="Filename pattern for post files")
    strict_front_matter: bool = Field(
        default=True,
        description="Fail the load on an invalid post instead of skipping it",
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server bind host")
    port: int = Field(default=8000, description="Server bind port")
    log_level: Literal["critical", "error", "warning", "info", "debug"] = Field(
        default="info", description="Log level"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _lower_log_level(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("post_glob")
    @classmethod
    def _validate_post_glob(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("POST_GLOB must not be empty")
        if "/" in v:
            raise ValueError("POST_GLOB matches file names only, not paths")
        return v
