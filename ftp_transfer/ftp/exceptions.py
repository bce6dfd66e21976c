"""FTP-specific exceptions for the FTP transfer helpers.

Custom exception hierarchy for connection and transfer operations.
Stream I/O failures are not wrapped: the original OSError or
ftplib error reaches the caller unchanged.
"""


class FTPError(Exception):
    """Base exception for all FTP-related errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class FTPConnectionError(FTPError):
    """Failed to establish FTP connection."""

    def __init__(self, host: str, port: int, original_error: Exception = None):
        self.host = host
        self.port = port
        message = f"Failed to connect to {host}:{port}"
        super().__init__(message, original_error)


class FTPAuthenticationError(FTPError):
    """FTP authentication (login) failed."""

    def __init__(self, username: str, original_error: Exception = None):
        self.username = username
        message = f"Authentication failed for user '{username}'"
        super().__init__(message, original_error)


class FTPNotConnectedError(FTPError):
    """Operation attempted without active FTP connection."""

    def __init__(self, operation: str = "Operation"):
        message = f"{operation} requires an active FTP connection"
        super().__init__(message)


class FTPTimeoutError(FTPError):
    """FTP operation timed out."""

    def __init__(self, operation: str = "Operation", timeout: int = 30):
        self.timeout = timeout
        message = f"{operation} timed out after {timeout} seconds"
        super().__init__(message)


class FTPArgumentError(FTPError, ValueError):
    """A required argument was missing or empty."""

    def __init__(self, argument: str, reason: str = "is required"):
        self.argument = argument
        message = f"Argument '{argument}' {reason}"
        super().__init__(message)


class FTPInvalidObjectTypeError(FTPError):
    """Remote object has the wrong type for the requested operation."""

    def __init__(self, path: str, object_type: str, expected: str = "file"):
        self.path = path
        self.object_type = object_type
        message = f"Invalid {expected}: '{path}' is a {object_type}"
        super().__init__(message)


class FTPRemoteDirectoryNotFoundError(FTPError):
    """Remote directory required by an operation does not exist."""

    def __init__(self, path: str):
        self.path = path
        message = f"Remote directory '{path}' does not exist"
        super().__init__(message)


class LocalDirectoryNotFoundError(FTPError, FileNotFoundError):
    """Local directory required by an operation does not exist."""

    def __init__(self, path: str):
        self.path = path
        message = f"Local directory '{path}' does not exist"
        super().__init__(message)
