from urllib.parse import urlparse

import pytest

from tigron_sms.config import Credentials

USER_INFO_BODY = (
    "<return><item><key>id</key><value>42</value></item>"
    "<item><key>name</key><value>alice</value></item></return>"
)
SEND_SMS_BODY = "<return><item><key>status</key><value>ok</value></item></return>"


class FakeResponse:
    def __init__(self, text: str, status_code: int = 200):
        self.text = text
        self.status_code = status_code
        self.encoding = None


class FakeSession:
    """Stands in for requests.Session, answering by service path"""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.posts = []
        self.closed = False

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data.decode("utf-8"), "headers": headers, "timeout": timeout})
        reply = self.responses.get(urlparse(url).path.rsplit("/", 1)[-1], FakeResponse(SEND_SMS_BODY))
        if isinstance(reply, Exception):
            raise reply
        return reply

    def close(self):
        self.closed = True


@pytest.fixture
def credentials():
    return Credentials("u", "p")


@pytest.fixture
def session():
    return FakeSession({
        "user": FakeResponse(USER_INFO_BODY),
        "sms": FakeResponse(SEND_SMS_BODY),
    })
