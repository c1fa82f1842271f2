# graph_console/exceptions.py

class ConsoleError(Exception):
    """Base class for failures raised by the console itself."""
    pass

class InvalidOptionError(ConsoleError):
    """Raised when a transaction option name or value is invalid."""

    def __init__(self, option: str, message: str):
        super().__init__(message)
        self.option = option

class UnsupportedOperationError(ConsoleError):
    """Raised for statements the console cannot run (e.g. compute)."""
    pass
