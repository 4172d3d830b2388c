"""Form service exception hierarchy."""


class FormError(Exception):
    """Base exception for form, question and response operations."""


class FormValidationError(FormError):
    """Raised when input is rejected before any write."""


class FormAuthorizationError(FormError):
    """Raised when the requester does not own the form."""


class FormNotFoundError(FormError):
    """Raised when a form, question or response does not exist."""


class FormStorageError(FormError):
    """Raised after a failed transaction has been rolled back.

    ``details`` names the underlying failure class only, never the statement.
    """

    def __init__(self, message: str, details: str) -> None:
        self.message = message
        self.details = details
        super().__init__(f"{message} ({details})")
