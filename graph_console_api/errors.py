# graph_console_api/errors.py

class ClientError(Exception):
    """Raised by a driver when the server or the RPC layer reports a failure."""
    pass

class ClientConnectionError(ClientError):
    """Raised when the driver cannot reach the server."""
    pass

class QuerySyntaxError(Exception):
    """Raised when query text cannot be split into statements."""
    pass
