"""Custom exceptions for the Clash controller client."""

class ClashError(Exception):
    """Base exception for controller operations."""
    pass

class AuthenticationError(ClashError):
    """Controller rejected the secret."""
    pass

class ControllerConnectionError(ClashError):
    """Connection to the controller failed."""
    pass

class APIError(ClashError):
    """API request failed."""
    def __init__(self, message: str, status_code: int = None, response_text: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text

class ConfigurationError(ClashError):
    """Configuration is invalid."""
    pass
