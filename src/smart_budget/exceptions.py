"""Error types shared across Smart Budget."""


class ValidationError(ValueError):
    """Raised when input is rejected before anything is written."""


class ItemNotFoundError(Exception):
    """Raised when an operation requires an item that does not exist."""

    def __init__(self, item_id: str):
        self.item_id = item_id
        super().__init__(f"Item with ID '{item_id}' not found")


class StorageFailure(Exception):
    """Raised when the database could not complete an operation."""

    def __init__(self, operation: str, cause: BaseException | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Storage failure during {operation}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
