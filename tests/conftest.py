import json

import pytest


class DummyResponse:
    def __init__(self, data=None, status_code=200, reason="OK", body=None):
        self._data = data
        self._body = body
        self.status_code = status_code
        self.reason = reason
        self.url = "http://example.com"

    def json(self):
        if self._body is not None:
            return json.loads(self._body)
        return self._data


class DummySession:
    """Stands in for ``requests.Session`` and records every call."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def _next(self, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, kwargs)


USER = {"id": 1, "name": "Admin", "slug": "admin"}


@pytest.fixture
def user_payload():
    return dict(USER)
