class InviteError(Exception):
    kind = "error"

    def __init__(self, message, status_code=None, data=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.data = data


class ValidationError(InviteError):
    """Bad or missing input. Nothing was sent upstream."""

    kind = "validation"


class ConfigurationError(InviteError):
    """No usable credentials. Nothing was sent upstream."""

    kind = "configuration"


class UpstreamError(InviteError):
    """Upstream answered with a non-200 status."""

    kind = "upstream"


class TransportError(InviteError):
    """The request never produced a response (DNS, connect, timeout...)."""

    kind = "transport"
