"""mockwright error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Parse
- 4xxx: Output
- 5xxx: Generate
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Parse (3xxx)
    PARSE_READ_FAILED = 3001
    PARSE_SYNTAX_ERROR = 3002
    PARSE_GRAMMAR_UNAVAILABLE = 3003
    PARSE_INVALID_ENCODING = 3004

    # Output (4xxx)
    OUTPUT_WRITER_UNAVAILABLE = 4001
    OUTPUT_WRITE_FAILED = 4002

    # Generate (5xxx)
    GENERATE_UNRESOLVED_EMBED = 5001
    GENERATE_FAILED = 5002

    # Internal (9xxx)
    INTERNAL_ERROR = 9001
    INTERNAL_CATALOG_FROZEN = 9002


@dataclass(eq=False)
class MockwrightError(Exception):
    """Base error with structured context.

    Mutable: ``contextlib`` assigns ``__traceback__`` on raised instances.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'PARSE_SYNTAX_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(MockwrightError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ParseError(MockwrightError):
    """A source file could not be turned into a declaration tree.

    Never fatal on its own: the scanner logs it and moves to the next file.
    """

    @classmethod
    def read_failed(cls, path: str, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_READ_FAILED,
            message=f"Cannot read {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def syntax_error(cls, path: str, line: int, column: int) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_SYNTAX_ERROR,
            message=f"{path}:{line}:{column}: syntax error",
            details={"path": path, "line": line, "column": column},
        )

    @classmethod
    def invalid_encoding(cls, path: str, offset: int) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_INVALID_ENCODING,
            message=f"{path}: invalid UTF-8 at byte {offset}",
            details={"path": path, "offset": offset},
        )

    @classmethod
    def grammar_unavailable(cls, reason: str) -> "ParseError":
        return cls(
            code=ErrorCode.PARSE_GRAMMAR_UNAVAILABLE,
            message=f"Go grammar not available: {reason}",
            details={"reason": reason},
        )


class OutputError(MockwrightError):
    """Output sink failures. Always fatal."""

    @classmethod
    def writer_unavailable(cls, target: str, reason: str) -> "OutputError":
        return cls(
            code=ErrorCode.OUTPUT_WRITER_UNAVAILABLE,
            message=f"Unable to get writer for {target}: {reason}",
            details={"target": target, "reason": reason},
        )

    @classmethod
    def write_failed(cls, path: str, reason: str) -> "OutputError":
        return cls(
            code=ErrorCode.OUTPUT_WRITE_FAILED,
            message=f"Failed to write {path}: {reason}",
            details={"path": path, "reason": reason},
        )


class GenerateError(MockwrightError):
    """Explicit mock generation failure. Aborts the run."""

    @classmethod
    def unresolved_embed(cls, interface: str, embed: str) -> "GenerateError":
        return cls(
            code=ErrorCode.GENERATE_UNRESOLVED_EMBED,
            message=f"{interface}: embedded interface {embed} is not declared in the same file",
            details={"interface": interface, "embed": embed},
        )

    @classmethod
    def failed(cls, interface: str, reason: str) -> "GenerateError":
        return cls(
            code=ErrorCode.GENERATE_FAILED,
            message=f"Error generating mock for {interface}: {reason}",
            details={"interface": interface, "reason": reason},
        )


class InternalError(MockwrightError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

    @classmethod
    def catalog_frozen(cls, path: str) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_CATALOG_FROZEN,
            message=f"Interface catalog is frozen; cannot add interfaces from {path}",
            details={"path": path},
        )
