from enum import Enum

class ErrorKind(Enum):
    IO = "io"
    NOT_BOUND = "not_bound"
    NOT_FOUND = "not_found"
    CONFIG = "config"

class TodoTreeError(Exception):
    """Base exception for all todotree errors."""
    kind: ErrorKind = ErrorKind.IO

class TodoIOError(TodoTreeError):
    """Reading or writing the todo file failed."""
    kind = ErrorKind.IO

class NotBoundError(TodoTreeError):
    """Save attempted on a list that was never bound to a file."""
    kind = ErrorKind.NOT_BOUND

    def __init__(self, message: str = "no file path set"):
        super().__init__(message)

class NotFoundError(TodoTreeError):
    """An operation referenced an id that is not in the list."""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, item_id: int):
        self.item_id = item_id
        super().__init__(f"no todo with id {item_id}")

class ConfigError(TodoTreeError):
    """The config file is unreadable or does not match its schema."""
    kind = ErrorKind.CONFIG
