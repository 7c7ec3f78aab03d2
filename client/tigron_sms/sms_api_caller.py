"""
Tigron SMS API Client Module

This module sends text messages through Tigron's SOAP API. A send is two
sequential calls: user.info to look up the authenticated user id, then
sms.send_sms with that id.
"""

from typing import List, Optional, Tuple

import requests

from .config import Credentials, TigronConfig, TIGRON_URL, TIGRON_NS, DEFAULT_TIMEOUT
from .exceptions import AuthenticationMissing, ConfigError, TigronSmsError
from .logging_config import get_logger, log_sms_event
from .response_reader import parse, value
from .soap_client import SoapClient

logger = get_logger(__name__)


class TigronSms:
    """Client to send a text message through Tigron's API"""

    def __init__(self, credentials: Tuple[str, str], url: str = TIGRON_URL, ns: str = TIGRON_NS,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.credentials = Credentials(*credentials)
        self.url = url
        self.ns = ns
        self.timeout = timeout
        self._session = session
        self._owns_session = False

    @classmethod
    def from_config(cls, config: TigronConfig, session: Optional[requests.Session] = None) -> "TigronSms":
        return cls(config.credentials, url=config.url, ns=config.ns,
                   timeout=config.timeout, session=session)

    def __enter__(self):
        """Context manager entry - share one HTTP session across calls"""
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _soap_client(self) -> SoapClient:
        return SoapClient(self.credentials, url=self.url, ns=self.ns,
                          timeout=self.timeout, session=self._session)

    def user_info(self) -> List[Tuple[str, str]]:
        """Return the key/value pairs describing the authenticated user"""
        return parse(self._soap_client().call("user", "info"))

    def user_id(self) -> str:
        """
        Retrieve the id of the authenticated user.

        Raises:
            AuthenticationMissing: if the response has no id or an empty one
        """
        user_id = value(self.user_info(), "id")
        if not user_id:
            raise AuthenticationMissing(
                f"user.info returned no id for user {self.credentials.username!r}")
        return user_id

    def send(self, to: str, from_: str, message: str) -> List[Tuple[str, str]]:
        """
        Send a text message.

        Args:
            to: Telephone number to send the message to. Format: +xx.xxxxxxxxx
            from_: Source of the message. Format: +xx.xxxxxxxxx
            message: Content of the message

        Returns:
            The key/value pairs of the sms.send_sms response, uninterpreted
        """
        logger.debug(f"Sending SMS from {from_} to {to}")
        user_id = None
        try:
            user_id = self.user_id()
            sms_params = [
                ("user_id", user_id),
                ("from", from_),
                ("to", to),
                ("message", message),
            ]
            response = self._soap_client().call("sms", "send_sms", sms_params)
        except TigronSmsError as e:
            log_sms_event('sms_failed', to_number=to, from_number=from_, user_id=user_id,
                          success=False, error=str(e))
            raise

        log_sms_event('sms_sent', to_number=to, from_number=from_, user_id=user_id)
        return parse(response)


def send_sms(config: TigronConfig, message: str, to_number: Optional[str] = None,
             from_number: Optional[str] = None) -> List[Tuple[str, str]]:
    """
    Send an SMS message using a loaded configuration

    Args:
        config: Tigron SMS configuration
        message: The message to send
        to_number: Recipient phone number (defaults to config.to_number)
        from_number: Sender identifier (defaults to config.from_number)

    Returns:
        List: key/value pairs of the send_sms response
    """
    recipient = to_number or config.to_number
    sender = from_number or config.from_number
    if not recipient:
        raise ConfigError("No recipient given and no to_number configured")
    if not sender:
        raise ConfigError("No sender given and no from_number configured")

    with TigronSms.from_config(config) as client:
        return client.send(recipient, sender, message)
