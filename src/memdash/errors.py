class MemdashError(Exception):
    """Base class for errors raised by memdash."""


class NotAuthenticatedError(MemdashError):
    """A mutation was requested without an established identity."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class MemoryNotFoundError(MemdashError):
    """No memory with the given id exists for the current identity."""

    def __init__(self, memory_id: str):
        super().__init__(f"Memory {memory_id} not found")
        self.memory_id = memory_id


class ExportFormatError(MemdashError):
    """An export document could not be parsed."""
