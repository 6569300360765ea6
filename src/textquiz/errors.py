class InvalidInput(ValueError):
    """Raised when a request is missing required text or carries malformed data."""


class BackendError(RuntimeError):
    """An external API call failed or returned something we could not parse."""

    def __init__(self, message: str, details: str = ""):
        super().__init__(message)
        self.details = details


class BackendUnavailable(BackendError):
    """The requested capability is not offered by the configured backend."""
