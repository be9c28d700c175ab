class RelayError(Exception):
    """Base class for errors that end a submission request with a known status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ClientInputError(RelayError):
    status_code = 400


class MethodNotAllowedError(RelayError):
    status_code = 405

    def __init__(self, message: str = "Method not allowed"):
        super().__init__(message)


class ConfigurationError(RelayError):
    """Delivery credentials are missing from the deployment."""

    status_code = 500


class DeliveryError(RelayError):
    """The Bot API rejected the message."""

    status_code = 500

    def __init__(self, message: str, error_code: int | None = None):
        super().__init__(message)
        self.error_code = error_code
