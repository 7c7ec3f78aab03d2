"""
Error kinds raised by the Tigron SMS client.

Every failure aborts the in-flight send; nothing is retried.
"""

from typing import Optional


class TigronSmsError(Exception):
    """Base class for all client errors"""


class ConfigError(TigronSmsError):
    """Configuration file missing or incomplete"""


class TransportFailure(TigronSmsError):
    """Network, DNS, TLS or I/O error while performing a call"""


class ProtocolFailure(TigronSmsError):
    """Non-2xx status, malformed envelope or SOAP fault"""

    def __init__(self, message: str, status_code: Optional[int] = None, fault: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.fault = fault


class AuthenticationMissing(TigronSmsError):
    """The user.info response carried no usable id"""


class BadArgument(TigronSmsError, ValueError):
    """An element or parameter name is not a valid XML name"""
