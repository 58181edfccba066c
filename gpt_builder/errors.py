class AppError(Exception):
    """Base error carrying the HTTP status and the message shown to clients."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, detail: str | None = None):
        if message is not None:
            self.message = message
        # detail is for the operator log only, never returned to the client
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Missing required fields"


class NotFoundError(AppError):
    status_code = 404
    message = "GPT not found"


class UpstreamError(AppError):
    status_code = 500
    message = "Internal server error"
