class ValidationError(ValueError):
    """Raised when a request payload does not fit the record schema."""


class StoreError(RuntimeError):
    pass
