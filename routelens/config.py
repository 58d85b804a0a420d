"""Configuration for the routelens CLI."""

import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from routelens.introspection.controller_discovery import API_PREFIX, CONTROLLER_SUFFIX, CONTROLLERS_DIR

ENV_PREFIX = "ROUTELENS_"


class RouteLensConfig(BaseModel):
    """Settings for a listing run; defaults follow the project conventions."""

    root_dir: str = Field(default=".", description="Project root containing the controllers directory")
    controllers_dir: str = Field(default=CONTROLLERS_DIR, description="Controllers directory under root_dir")
    controller_suffix: str = Field(default=CONTROLLER_SUFFIX, description="Infix that marks controller files")
    api_prefix: str = Field(default=API_PREFIX, description="Prefix under which controllers are mounted")
    log_level: str = Field(default="WARNING", description="Logging level name")
    output_format: Literal["json", "table"] = Field(default="json", description="Report format")

    @field_validator("controller_suffix")
    @classmethod
    def validate_suffix(cls, v: str) -> str:
        if not (v.startswith(".") and v.endswith(".") and len(v) > 2):
            raise ValueError(f"Controller suffix must look like '.controller.', got {v!r}")
        return v

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        if v and not v.startswith("/"):
            raise ValueError(f"API prefix must start with '/', got {v!r}")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "RouteLensConfig":
        """Create configuration from ROUTELENS_* environment variables (and a .env file)."""
        load_dotenv(dotenv_path)

        values = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                values[name] = value
        return cls(**values)
