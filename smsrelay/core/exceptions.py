"""
Custom exception classes for the SMS relay.
"""
from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception class for the relay application."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(RelayException):
    """Raised when required gateway or service configuration is missing."""

    def __init__(
        self,
        message: str = "SMS configuration incomplete",
        code: str = "CONFIGURATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=500, details=details)


class AuthenticationError(RelayException):
    """Raised when the caller did not present an API key."""

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "AUTHENTICATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=401, details=details)


class AuthorizationError(RelayException):
    """Raised when the caller's API key is not accepted."""

    def __init__(
        self,
        message: str = "Not authorized",
        code: str = "AUTHORIZATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=403, details=details)


class ValidationError(RelayException):
    """Raised for validation errors."""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, status_code=422, details=details)


class SMSGatewayError(RelayException):
    """Raised when there's an error with the SMS gateway."""

    def __init__(
        self,
        message: str = "SMS Gateway error",
        code: str = "SMS_GATEWAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 502,
    ):
        super().__init__(message=message, code=code, status_code=status_code, details=details)


class GatewaySessionError(SMSGatewayError):
    """Raised when a gateway session token could not be generated or enabled."""

    def __init__(
        self,
        message: str = "Failed to obtain gateway session token",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            code="GATEWAY_SESSION_ERROR",
            details=details
        )
