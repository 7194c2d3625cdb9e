"""Directory-specific exceptions for error handling.

Each exception carries the HTTP status and error type the API layer reports
when it reaches the client.
"""


class DirectoryError(Exception):
    """Base exception for all directory operations.

    Attributes:
        message: Human-readable error description
        status: HTTP status code reported to the client
        type: Machine-readable error type
    """

    status = 500
    type = "INTERNAL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API error response format."""
        return {
            "message": self.message,
            "type": self.type,
            "statusCode": self.status,
        }


class ClientError(DirectoryError):
    """The request was malformed or cannot be honoured as submitted."""

    status = 400
    type = "BAD_REQUEST"


class UnsupportedOperationError(ClientError):
    """The requested operation is not supported by this resource."""

    type = "UNSUPPORTED"


class ObjectExistsError(ClientError):
    """Object creation failed - identifier already in use."""

    status = 409
    type = "CONFLICT"


class NotFoundError(DirectoryError):
    """Object lookup failed - identifier does not exist."""

    status = 404
    type = "NOT_FOUND"


class UnauthorizedError(DirectoryError):
    """No valid session is associated with the request."""

    status = 401
    type = "UNAUTHORIZED"
