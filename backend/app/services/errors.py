"""Autofill error taxonomy, translated into structured responses at the API edge."""

from __future__ import annotations


class AutofillError(Exception):
    """Base error carrying an HTTP status and a machine-readable code."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthenticationRequiredError(AutofillError):
    status_code = 401
    code = "unauthorized"

    def __init__(self, message: str = "Unauthorized", *, details: str | None = None) -> None:
        super().__init__(message, details=details)


class MappingValidationError(AutofillError):
    status_code = 400
    code = "validation_error"


class AutofillDisabledError(AutofillError):
    status_code = 403
    code = "autofill_disabled"

    def __init__(self, message: str = "Autofill disabled", *, details: str | None = None) -> None:
        super().__init__(message, details=details)


class MappingStoreError(AutofillError):
    """Persistence failure; never retried inside the service."""

    status_code = 500
    code = "store_error"

    def __init__(self, message: str = "Server error", *, details: str | None = None) -> None:
        super().__init__(message, details=details)
