"""
Error Taxonomy
==============

Exceptions raised by the XSLT processor façade. Every error carries a
human-readable message naming the offending artifact (path, parameter name,
property name/value) and chains the underlying engine exception when there
is one.
"""

from typing import Optional


class XSLTBridgeError(Exception):
    """Base class of all xsltbridge errors."""


class StylesheetNotFound(XSLTBridgeError):
    """Raised when the stylesheet file cannot be read."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Stylesheet not found: {path}")


class StylesheetInvalid(XSLTBridgeError):
    """Raised when the stylesheet does not parse or the engine rejects it."""

    def __init__(self, stylesheet: str, reason: str = ""):
        self.stylesheet = stylesheet
        self.reason = reason
        message = f"Problem with XSLT stylesheet: {stylesheet}"
        if reason:
            message += f"\n{reason}"
        super().__init__(message)


class InputNotFound(XSLTBridgeError):
    """Raised when the input document file cannot be read."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Input document not found: {path}")


class TransformFailed(XSLTBridgeError):
    """Raised when parsing the input or applying the stylesheet fails."""

    def __init__(self, document: str, reason: str = ""):
        self.document = document
        self.reason = reason
        message = f"Problem with XML document: {document}"
        if reason:
            message += f"\n{reason}"
        super().__init__(message)


class ParameterSetFailed(XSLTBridgeError):
    """Raised when a parameter value cannot be stored."""

    def __init__(self, name: str, value: object = None):
        self.name = name
        self.value = value
        super().__init__(f"Could not set parameter: {name} to {value!r}")


class ParameterGetFailed(XSLTBridgeError):
    """Raised when a stored parameter cannot be read back."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Could not get parameter: {name}")


class OutputPropertySetFailed(XSLTBridgeError):
    """Raised when the engine rejects an output property."""

    def __init__(self, name: str, value: str, reason: str = ""):
        self.name = name
        self.value = value
        self.reason = reason
        message = f"Could not set output property: {name} to {value!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class MarkupEncodingError(XSLTBridgeError):
    """Raised when a value cannot be encoded as markup."""

    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)


class EngineFactoryError(XSLTBridgeError):
    """Raised on misuse of the process-wide engine factory."""
