# Copyright (c) 2025 Fernando Guerriero Cardoso da Silva.
# SPDX-License-Identifier: MIT
#

from typing import Any, Dict, Optional

from fastapi import status


class AnnapurnaError(Exception):
    """Base class for errors raised by the donation services."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(AnnapurnaError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, details={"field": field} if field else None)


class AuthenticationError(AnnapurnaError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class AuthorizationError(AnnapurnaError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AnnapurnaError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        message = f"{entity} not found"
        super().__init__(message, details={"id": entity_id} if entity_id else None)


class AlreadyClaimedError(AnnapurnaError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, donation_id: str):
        super().__init__("Donation not available for claiming", details={"donation_id": donation_id})


class InvalidTransitionError(AnnapurnaError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, current: Optional[str], requested: str):
        super().__init__(
            f"Cannot move donation from {current} to {requested}",
            details={"current_status": current, "requested_status": requested},
        )


class PersistenceError(AnnapurnaError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "Database operation failed", operation: Optional[str] = None):
        super().__init__(message, details={"operation": operation} if operation else None)


def create_error_response(error: AnnapurnaError) -> dict:
    response = {"message": error.message, "error_type": error.__class__.__name__}
    if error.details:
        response["details"] = error.details
    return response
