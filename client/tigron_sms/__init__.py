"""
Tigron SMS Client

A Python client library for sending text messages through Tigron's SOAP API.
"""

from .config import Credentials, TigronConfig, TIGRON_URL, TIGRON_NS
from .exceptions import (
    TigronSmsError, ConfigError, TransportFailure, ProtocolFailure,
    AuthenticationMissing, BadArgument
)
from .response_reader import parse, value
from .soap_client import SoapClient
from .sms_api_caller import TigronSms, send_sms

__all__ = [
    'Credentials',
    'TigronConfig',
    'TIGRON_URL',
    'TIGRON_NS',
    'TigronSmsError',
    'ConfigError',
    'TransportFailure',
    'ProtocolFailure',
    'AuthenticationMissing',
    'BadArgument',
    'parse',
    'value',
    'SoapClient',
    'TigronSms',
    'send_sms',
]

__version__ = "0.1.0"
