"""Error taxonomy shared by the stores, the REST layer and the HTTP client."""


class BoardError(Exception):
    status_code = 500

    def __init__(self, message: str = "Unknown error occurred"):
        super().__init__(message)
        self.message = message


class ValidationError(BoardError):
    status_code = 400


class InvalidPosition(ValidationError):
    def __init__(self, position: int):
        super().__init__("Position must be a non-negative number")
        self.position = position


class NotFound(BoardError):
    status_code = 404


class InternalError(BoardError):
    status_code = 500


def error_for_status(status_code: int, message: str) -> BoardError:
    if status_code == 400:
        return ValidationError(message)
    if status_code == 404:
        return NotFound(message)
    return InternalError(message)
