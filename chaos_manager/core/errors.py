"""Domain errors raised by the stores and translated to HTTP responses."""


class ChaosManagerError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChaosManagerError):
    """Missing or malformed input."""
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(ChaosManagerError):
    status_code = 404
    default_message = "Not found"


class AuthError(ChaosManagerError):
    """Bad credentials or an unusable access token."""
    status_code = 401
    default_message = "Incorrect email or password"


class ConflictError(ChaosManagerError):
    status_code = 409
    default_message = "Already exists"


class StoreUnavailable(ChaosManagerError):
    """The database has not been initialized (or failed to)."""
    status_code = 503
    default_message = "Database is not available"
