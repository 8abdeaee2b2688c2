from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationServiceError(ServiceError):
    """Missing or malformed input."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class AuthorizationServiceError(ServiceError):
    """Caller is not the party allowed to act on the resource right now."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)


class NotFoundServiceError(ServiceError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ConflictServiceError(ServiceError):
    """Double booking or stale state."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status.HTTP_409_CONFLICT)
