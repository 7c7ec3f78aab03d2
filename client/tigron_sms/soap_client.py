"""
Minimal SOAP client for the Tigron API

Only what sending an SMS needs: an envelope with an authenticate_user
header and a single procedure call in the body. No WSDL introspection.
"""

import re
from typing import List, Optional, Sequence, Tuple
from xml.sax.saxutils import escape

import requests

from .config import Credentials, TIGRON_URL, TIGRON_NS, DEFAULT_TIMEOUT
from .exceptions import BadArgument, ProtocolFailure, TransportFailure
from .logging_config import get_logger
from .response_reader import find_fault

logger = get_logger(__name__)

ENVELOPE_TEMPLATE = """<?xml version="1.0"?>
<soap:Envelope xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/"
               soap:encodingStyle="http://www.w3.org/2003/05/soap-encoding">
  <soap:Header>
    <authenticate_user xmlns="{ns}">
      <username>{username}</username>
      <password>{password}</password>
    </authenticate_user>
  </soap:Header>
  <soap:Body>
    {procedure}
  </soap:Body>
</soap:Envelope>"""

# ASCII subset of the XML Name production, without colons
_XML_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9._-]*$')

Parameters = Sequence[Tuple[str, str]]


def check_name(name: str, what: str) -> str:
    """Reject names that cannot be used as an XML element name"""
    if not isinstance(name, str) or not _XML_NAME.match(name):
        raise BadArgument(f"Invalid {what} name: {name!r}")
    return name


class SoapClient:
    """Client performing authenticated procedure calls against one SOAP endpoint"""

    def __init__(self, credentials: Credentials, url: str = TIGRON_URL, ns: str = TIGRON_NS,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.ns = ns
        self.credentials = Credentials(*credentials)
        self.timeout = timeout
        self.session = session

    def service_url(self, service: str) -> str:
        """Endpoint for a service; the API expects ?WSDL on every call"""
        return f"{self.url}/{check_name(service, 'service')}?WSDL"

    def render_procedure(self, command: str, parameters: Optional[Parameters] = None) -> str:
        """
        Render the procedure element for the SOAP body.

        Args:
            command: Procedure name, used as the element name. E.g: "send_sms"
            parameters: Ordered (name, value) pairs. E.g: [("from", "+32.1"), ("to", "+32.2")]

        Returns:
            The procedure element as a string, parameters in input order
        """
        check_name(command, 'command')

        params_xml = []
        for name, param_value in parameters or []:
            check_name(name, 'parameter')
            params_xml.append(f"<{name}>{escape(str(param_value))}</{name}>")

        ns = escape(self.ns, {'"': '&quot;'})
        return f'<{command} xmlns="{ns}">{"".join(params_xml)}</{command}>'

    def render_envelope(self, procedure: str) -> str:
        """Wrap a rendered procedure element in the authenticated envelope"""
        return ENVELOPE_TEMPLATE.format(
            ns=escape(self.ns, {'"': '&quot;'}),
            username=escape(self.credentials.username),
            password=escape(self.credentials.password),
            procedure=procedure,
        )

    def call(self, service: str, command: str, parameters: Optional[Parameters] = None) -> str:
        """
        Send a command to the API and return the response body.

        Args:
            service: Service of the API to execute the command on. E.g: "sms"
            command: The command to execute. E.g: "send_sms"
            parameters: Ordered parameters of the command, or None

        Returns:
            str: The body of the API response decoded as UTF-8

        Raises:
            BadArgument: service, command or a parameter name is not a valid XML name
            TransportFailure: the request could not be performed or read
            ProtocolFailure: non-2xx status, malformed response or SOAP fault
        """
        url = self.service_url(service)
        envelope = self.render_envelope(self.render_procedure(command, parameters))

        param_names: List[str] = [name for name, _ in parameters or []]
        logger.debug(f"Calling {service}.{command} at {url} with parameters {param_names}")

        post = self.session.post if self.session is not None else requests.post
        try:
            response = post(
                url,
                data=envelope.encode('utf-8'),
                headers={'Content-Type': 'application/xml'},
                timeout=self.timeout,
            )
            response.encoding = 'utf-8'
            body = response.text
        except requests.exceptions.RequestException as e:
            logger.debug(f"{service}.{command} transport error: {e}")
            raise TransportFailure(f"Failed to call {service}.{command}: {e}") from e

        status = response.status_code
        logger.debug(f"{service}.{command} returned HTTP {status} ({len(body)} chars)")

        if not 200 <= status < 300:
            # SOAP 1.1 servers report faults with HTTP 500
            fault = None
            try:
                fault = find_fault(body)
            except ProtocolFailure:
                pass
            message = f"{service}.{command} returned HTTP {status}"
            if fault is not None:
                message = f"{message}: {fault}"
            raise ProtocolFailure(message, status_code=status, fault=fault)

        fault = find_fault(body)
        if fault is not None:
            raise ProtocolFailure(f"{service}.{command} failed: {fault}", status_code=status, fault=fault)

        return body
