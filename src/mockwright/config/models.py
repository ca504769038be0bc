"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config() (CLI flags)
2. Environment variables (MOCKWRIGHT__SECTION__KEY)
3. Project YAML (.mockwright.yaml in the working directory)
4. Built-in defaults (this file)

Environment Variable Format:
    MOCKWRIGHT__<SECTION>__<KEY>=<VALUE>

Examples:
    MOCKWRIGHT__LOGGING__LEVEL=DEBUG
    MOCKWRIGHT__GENERATE__PACKAGE_NAME=fakes
    MOCKWRIGHT__REGISTRATION__MODULE_ROOT=/work/go/src
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from mockwright.config.constants import (
    DEFAULT_MOCK_PACKAGE,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_REGISTER_PATH,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        MOCKWRIGHT__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. Diagnostics the user must see go through the console.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class GenerateConfig(BaseModel):
    """Mock generation configuration.

    Env vars:
        MOCKWRIGHT__GENERATE__IN_PACKAGE: Write mocks beside the interface
        MOCKWRIGHT__GENERATE__OUTPUT_DIR: Directory for external-package mocks
        MOCKWRIGHT__GENERATE__PACKAGE_NAME: Package clause for external-package mocks
        MOCKWRIGHT__GENERATE__CASE: File name casing (camel, underscore)
    """

    in_package: bool = False
    output_dir: str = Field(
        default=DEFAULT_OUTPUT_DIR,
        description="Directory receiving mocks when in_package is false.",
    )
    package_name: str = Field(
        default=DEFAULT_MOCK_PACKAGE,
        description="Output package name when in_package is false.",
    )
    note: str = Field(default="", description="Comment lines prepended to every mock.")
    print_stdout: bool = Field(default=False, description="Write mocks to stdout instead of files.")
    case: Literal["camel", "underscore"] = Field(
        default="camel",
        description="File name casing for mocks: HTTPClient.go or http_client.go.",
    )

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Not a valid Go package name: {v!r}")
        return v


class RegisterConfig(BaseModel):
    """Registration file synthesis.

    Env vars:
        MOCKWRIGHT__REGISTRATION__ENABLED: Synthesize register.go when a provider is found
        MOCKWRIGHT__REGISTRATION__OUTPUT_PATH: Target file, always overwritten
        MOCKWRIGHT__REGISTRATION__MODULE_ROOT: Source root stripped from the provider directory
    """

    enabled: bool = True
    output_path: str = DEFAULT_REGISTER_PATH
    module_root: str | None = Field(
        default=None,
        description="Import path root. Defaults to $GOPATH/src.",
    )


class MockwrightConfig(BaseModel):
    """Root configuration model.

    Use this for type hints. For loading, use load_config() from loader.py.
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
    registration: RegisterConfig = Field(default_factory=RegisterConfig)
