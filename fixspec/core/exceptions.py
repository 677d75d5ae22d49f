"""
FIXSPEC - Custom Exceptions

This module defines custom exception classes for the dictionary compiler.
"""

from enum import Enum
from typing import Any, Dict, Optional


class FixSpecException(Exception):
    """Base exception for all FIXSPEC errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "FIXSPEC_ERROR"
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} (Code: {self.error_code}, Context: {self.context})"
        return f"{self.message} (Code: {self.error_code})"


class ConfigurationException(FixSpecException):
    """Exception raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(
            message,
            error_code="CONFIG_ERROR",
            context={"config_key": config_key} if config_key else {},
        )


class DocumentError(FixSpecException):
    """Exception raised when a dictionary document cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
    ):
        context = {}
        if path:
            context["path"] = path
        if line is not None:
            context["line"] = line

        super().__init__(message, error_code="DOCUMENT_ERROR", context=context)


class SchemaErrorKind(str, Enum):
    """Kinds of fatal schema construction failures."""

    INVALID_FIELD = "InvalidField"
    DUPLICATE_TAG = "DuplicateTag"
    DUPLICATE_NAME = "DuplicateName"
    UNKNOWN_FIELD_TYPE = "UnknownFieldType"
    UNRESOLVED_HEADER_FIELD = "UnresolvedHeaderField"
    UNRESOLVED_TRAILER_FIELD = "UnresolvedTrailerField"
    UNRESOLVED_COMPONENT_REFERENCE = "UnresolvedComponentReference"
    CYCLIC_COMPONENT_REFERENCE = "CyclicComponentReference"
    DUPLICATE_COMPONENT = "DuplicateComponent"
    DUPLICATE_MESSAGE = "DuplicateMessage"
    MISSING_SECTION = "MissingSection"
    INVALID_VERSION = "InvalidVersion"

    @property
    def error_code(self) -> str:
        """SCHEMA_ prefixed upper snake case code, e.g. SCHEMA_INVALID_FIELD."""
        return f"SCHEMA_{self.name}"


class SchemaError(FixSpecException):
    """
    Exception raised when a schema version cannot be compiled consistently.

    Always fatal for the version being compiled; no artifact may be emitted
    for it.
    """

    def __init__(
        self,
        kind: SchemaErrorKind,
        message: str,
        name: Optional[str] = None,
        version: Optional[str] = None,
    ):
        context: Dict[str, Any] = {"kind": kind.value}
        if name is not None:
            context["name"] = name
        if version is not None:
            context["version"] = version

        super().__init__(message, error_code=kind.error_code, context=context)
        self.kind = kind
        self.name = name
        self.version = version


class EmissionError(FixSpecException):
    """Exception raised when generated tables cannot be rendered or written."""

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        output_path: Optional[str] = None,
    ):
        context = {}
        if language:
            context["language"] = language
        if output_path:
            context["output_path"] = output_path

        super().__init__(message, error_code="EMISSION_ERROR", context=context)
