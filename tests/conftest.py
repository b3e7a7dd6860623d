"""
Shared fixtures: a fake Scale Dynamix API behind a mocked requests.Session.
"""

from unittest.mock import MagicMock, patch

import pytest

from scaledynamix import ScaleDynamixClient
from scaledynamix.config import ScaleDynamixConfig

API_URI = "https://api.test/"
API_PREFIX = "https://api.test/v1/"


def make_response(body, status_code=200):
    """Create a mock requests.Response returning ``body`` from json()."""
    response = MagicMock()
    response.status_code = status_code
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


class FakeAPI:
    """Routes session.request() calls to canned responses keyed by (method, path)."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, method, path, result=None, success=True, status_code=200, body=None):
        """Queue a response; the last queued response for a route is repeated."""
        if body is None:
            body = {"success": success, "result": result}
        self.routes.setdefault((method, path), []).append(make_response(body, status_code))

    def replace(self, method, path, *args, **kwargs):
        """Drop queued responses for a route and queue a new one."""
        self.routes.pop((method, path), None)
        self.add(method, path, *args, **kwargs)

    def __call__(self, method, url, **kwargs):
        assert url.startswith(API_PREFIX)
        path = url[len(API_PREFIX):]
        self.calls.append((method, path, kwargs.get("params") or kwargs.get("data")))
        responses = self.routes[(method, path)]
        return responses.pop(0) if len(responses) > 1 else responses[0]

    def count(self, method=None, path=None):
        """Count recorded requests, optionally filtered by method and path."""
        return sum(
            1 for m, p, _ in self.calls
            if (method is None or m == method) and (path is None or p == path)
        )

    def last_params(self, method, path):
        """Parameters of the most recent request to a route."""
        for m, p, params in reversed(self.calls):
            if (m, p) == (method, path):
                return params
        raise AssertionError(f"No {method} {path} request was made")


@pytest.fixture
def api():
    """Fake API with a working providers endpoint."""
    fake = FakeAPI()
    fake.add("GET", "providers", {"providers": ["aws", "digitalocean"]})

    with patch("scaledynamix.api._http.requests.Session") as mock_session_cls:
        session = MagicMock()
        session.headers = {}
        session.request.side_effect = fake
        mock_session_cls.return_value = session
        fake.session = session
        yield fake


@pytest.fixture
def config():
    """Client configuration pointing at the fake API."""
    return ScaleDynamixConfig(api_uri=API_URI)


@pytest.fixture
def client(api, config):
    """Logged-in client."""
    client = ScaleDynamixClient(config)
    client.login("test-key")
    return client


@pytest.fixture
def site_metadata():
    """Metadata record for site 7 with two tags and two domains."""
    return [{
        "id": 7,
        "name": "blog",
        "php_version": "8.2",
        "tags": {"3": "production", "4": "wordpress"},
        "domains": [
            {"domain": "blog.example.com", "id": 11, "primary": True},
            {"domain": "www.example.com", "id": 12, "primary": False},
        ],
    }]


@pytest.fixture
def site(api, client, site_metadata):
    """Site 7 as returned by get_sites(), with its metadata endpoint ready."""
    api.add("GET", "sites", {"sites": [{"id": 7, "name": "blog", "stack_id": 2}]})
    api.add("GET", "sites/7", site_metadata)
    return client.get_sites()[0]
