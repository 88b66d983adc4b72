class GatewayError(Exception):
    """Base error carrying the HTTP status it should be reported with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(GatewayError):
    """Missing or invalid request input."""

    status_code = 400


class AuthError(GatewayError):
    """Missing or invalid authenticated session."""

    status_code = 401


class ServerError(GatewayError):
    """Salesforce or other upstream failure."""

    status_code = 500


class ParseError(GatewayError):
    """The uploaded CSV is structurally malformed."""

    status_code = 500
