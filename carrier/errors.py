"""
Error types for the Shopify Carrier Service App.

Every error carries the HTTP status the API layer should answer with, so
route handlers can let them propagate to a single Flask error handler.
"""

from typing import Any, Dict, Optional


class CarrierAppError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": type(self).__name__,
            "message": self.message,
        }


class UnauthenticatedError(CarrierAppError):
    """Request carries no valid merchant session."""

    status_code = 401


class ValidationError(CarrierAppError):
    """Request fields are missing or malformed."""

    status_code = 400


class DuplicateNameError(CarrierAppError):
    """A carrier service with the same name already exists for the shop."""

    status_code = 409

    def __init__(self, name: str):
        super().__init__(f"A carrier service named '{name}' already exists")
        self.name = name


class RemoteServiceError(CarrierAppError):
    """
    Shopify Admin API call failed.

    Keeps the upstream HTTP status (502 when there was no response at all)
    plus whatever context the caller attached, e.g. the carrier service
    name and callback URL of a failed creation.
    """

    status_code = 502

    def __init__(self, message: str, status_code: Optional[int] = None, **context: Any):
        super().__init__(message, status_code)
        self.context = context

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.context:
            payload["context"] = self.context
        return payload
