"""Chat-related exceptions."""

from .base import BaseAppException, ConflictError, NotFoundError, UnauthorizedError


class ChatNotFoundError(NotFoundError):
    """Raised when a chat is not found."""

    def __init__(self, message: str = "Chat not found"):
        super().__init__(message=message)
        self.error_code = "CHAT_NOT_FOUND"
        self.detail["error_code"] = self.error_code


class ChatOwnershipError(UnauthorizedError):
    """Raised when the caller does not own the chat."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message)


class ChatAlreadyExistsError(ConflictError):
    """Raised when a chat with the same id has already been created."""

    def __init__(self, message: str = "Chat ID already exists"):
        super().__init__(message=message)


class ModelNotFoundError(BaseAppException):
    """Raised when the requested model id is not in the allow-list."""

    def __init__(self, message: str = "Model not found"):
        super().__init__(message=message, status_code=404, error_code="MODEL_NOT_FOUND")


class NoUserMessageError(BaseAppException):
    """Raised when a chat request carries no user turn."""

    def __init__(self, message: str = "No user message found"):
        super().__init__(message=message, status_code=400, error_code="NO_USER_MESSAGE")
