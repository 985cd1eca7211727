"""
Eureka Client Error Handling
Exception hierarchy for registry client failures
"""


class EurekaError(Exception):
    """Base exception for all registry client errors"""
    code = 2000
    message = "Eureka error"

    def __init__(self, message=None, cause=None):
        self.message = message or self.message
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self):
        return {
            'code': self.code,
            'message': self.message,
            'cause': str(self.cause) if self.cause else None
        }


# Request Errors (2000-2099)
class TransportError(EurekaError):
    """Connection, DNS, TLS or timeout failure before a status was received"""
    code = 2001
    message = "Network error"

    def __init__(self, cause=None):
        super().__init__(f"Network error {cause}" if cause else None, cause)


class UnexpectedStatusError(EurekaError):
    """Registry answered with a status the operation does not accept"""
    code = 2002
    message = "Unexpected status code"

    def __init__(self, status_code, response=None):
        self.status_code = status_code
        self.response = response
        super().__init__(f"Unexpected status code {status_code}")

    @property
    def body(self):
        """Raw response body, if a response was captured"""
        return self.response.text if self.response is not None else None

    def to_dict(self):
        data = super().to_dict()
        data['status_code'] = self.status_code
        data['body'] = self.body
        return data


class DecodeError(EurekaError):
    """Response body does not match the expected wire shape"""
    code = 2003
    message = "Parsing error"

    def __init__(self, message=None, cause=None):
        super().__init__(f"Parsing error {message}" if message else None, cause)
        self.detail = message


class AppNotFoundError(EurekaError):
    """Application is missing from the registry snapshot"""
    code = 2004
    message = "App not found in registry"

    def __init__(self, app_name):
        self.app_name = app_name
        super().__init__(f"App {app_name} not found in registry")


class EurekaIOError(EurekaError):
    """Reading or writing the message body failed at the byte level"""
    code = 2005
    message = "IO error"

    def __init__(self, cause=None):
        super().__init__(f"IO error: {cause}" if cause else None, cause)


# Configuration Errors (2100-2199)
class ConfigurationError(EurekaError):
    """Configuration errors"""
    code = 2100
    message = "Configuration error"


class InvalidConfigurationError(ConfigurationError):
    """Invalid configuration"""
    code = 2101
    message = "Invalid configuration"


__all__ = [
    'EurekaError',
    'TransportError',
    'UnexpectedStatusError',
    'DecodeError',
    'AppNotFoundError',
    'EurekaIOError',
    'ConfigurationError',
    'InvalidConfigurationError',
]
