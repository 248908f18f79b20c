"""Errors raised by the event generators."""


class ConfigurationError(ValueError):
    """Raised when a generator is handed structurally invalid configuration,
    such as a difficulty tier without a name or with a malformed power range.
    """

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])
