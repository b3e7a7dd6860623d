"""
Tests for the base HTTP client.
"""

import socket
import ssl
import threading
from unittest.mock import MagicMock, patch

import pytest
import requests

from scaledynamix import ScaleDynamixClient, __version__
from scaledynamix.api._http import HTTPClient, TLSAdapter
from scaledynamix.config import ScaleDynamixConfig
from scaledynamix.exceptions import (
    APIError,
    AuthenticationError,
    ErrorKind,
    MalformedResponseError,
    NotAuthenticatedError,
    UnimplementedError,
)

from .conftest import API_URI, make_response


@pytest.fixture
def session():
    """Mocked requests.Session."""
    with patch("scaledynamix.api._http.requests.Session") as mock_session_cls:
        session = MagicMock()
        session.headers = {}
        mock_session_cls.return_value = session
        yield session


@pytest.fixture
def http(session):
    """Open HTTP client."""
    http = HTTPClient(ScaleDynamixConfig(api_uri=API_URI, timeout=5))
    http.open("secret-key")
    return http


class TestConfig:
    """Tests for URL building."""

    def test_api_url(self):
        """Test joining endpoint, version and path."""
        config = ScaleDynamixConfig()
        assert config.api_url("sites/42") == "https://api.scaledynamix.com/v1/sites/42"

    def test_api_url_without_trailing_slash(self):
        """Test an endpoint given without a trailing slash."""
        config = ScaleDynamixConfig(api_uri="https://example.test", api_version="v2")
        assert config.api_url("/providers") == "https://example.test/v2/providers"


class TestSession:
    """Tests for session lifecycle."""

    def test_not_open(self):
        """Test requests before open() fail."""
        http = HTTPClient()
        assert not http.is_open
        with pytest.raises(NotAuthenticatedError) as exc_info:
            http.request("GET", "providers")
        assert exc_info.value.kind is ErrorKind.NOT_AUTHENTICATED

    def test_open_sets_headers(self, http, session):
        """Test the API key and client headers are attached to the session."""
        assert http.is_open
        assert http.api_key == "secret-key"
        assert session.headers["Key"] == "secret-key"
        assert session.headers["Accept"] == "application/json"
        assert session.headers["User-Agent"] == f"scaledynamix/{__version__}"

    def test_open_mounts_tls_adapter(self, http, session):
        """Test HTTPS traffic goes through the TLS adapter."""
        mounts = {call.args[0]: call.args[1] for call in session.mount.call_args_list}
        assert isinstance(mounts["https://"], TLSAdapter)

    def test_close(self, http, session):
        """Test close() drops the session and the key."""
        http.close()
        assert not http.is_open
        assert http.api_key == ""
        session.close.assert_called_once()

    def test_tls_adapter_caps_version(self):
        """Test the adapter's pools negotiate at most TLS 1.3."""
        adapter = TLSAdapter()
        pool_kw = adapter.poolmanager.connection_pool_kw
        assert pool_kw["ssl_maximum_version"] == ssl.TLSVersion.TLSv1_3
        assert "ssl_context" not in pool_kw


class TestRequest:
    """Tests for request()."""

    def test_get_returns_result(self, http, session):
        """Test GET sends query parameters and unwraps the result."""
        session.request.return_value = make_response({"success": True, "result": {"providers": ["aws"]}})

        result = http.request("GET", "providers", params={"a": 1, "b": None})

        assert result == {"providers": ["aws"]}
        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://api.test/v1/providers"
        assert kwargs["params"] == {"a": 1}
        assert kwargs["timeout"] == 5
        assert kwargs["verify"] is True

    def test_post_sends_form_data(self, http, session):
        """Test non-GET requests send parameters as a form body."""
        session.request.return_value = make_response({"success": True, "result": {"id": 3}})

        http.request("post", "domains/7", params={"domain": "example.com"})

        kwargs = session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["data"] == {"domain": "example.com"}
        assert "params" not in kwargs

    def test_missing_result(self, http, session):
        """Test a successful envelope without result."""
        session.request.return_value = make_response({"success": True})
        assert http.request("DELETE", "sites/7") is None

    def test_unsupported_method(self, http, session):
        """Test verbs other than GET, POST, PUT and DELETE."""
        with pytest.raises(UnimplementedError):
            http.request("PATCH", "sites/7")
        session.request.assert_not_called()

    def test_unauthorized(self, http, session):
        """Test HTTP 401 raises AuthenticationError before reading the body."""
        response = make_response({"success": True, "result": {}}, status_code=401)
        session.request.return_value = response

        with pytest.raises(AuthenticationError) as exc_info:
            http.request("GET", "sites")

        assert exc_info.value.status_code == 401
        assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
        response.json.assert_not_called()

    def test_body_not_json(self, http, session):
        """Test a non-JSON body."""
        session.request.return_value = make_response(ValueError("no json"))
        with pytest.raises(MalformedResponseError):
            http.request("GET", "sites")

    @pytest.mark.parametrize("body", [
        {"result": {}},
        {"success": "true", "result": {}},
        {"success": 1},
        ["success"],
    ])
    def test_missing_success_flag(self, http, session, body):
        """Test bodies without a boolean success member."""
        session.request.return_value = make_response(body)
        with pytest.raises(MalformedResponseError) as exc_info:
            http.request("GET", "sites")
        assert exc_info.value.kind is ErrorKind.MALFORMED_RESPONSE

    def test_success_false(self, http, session):
        """Test a server-reported failure includes the payload."""
        body = {"success": False, "result": {"error": "stack is full"}}
        session.request.return_value = make_response(body, status_code=200)

        with pytest.raises(APIError) as exc_info:
            http.request("POST", "sites", params={"name": "x"})

        assert "stack is full" in str(exc_info.value)
        assert exc_info.value.response_data == body
        assert exc_info.value.kind is ErrorKind.REQUEST_FAILED

    @pytest.mark.parametrize("error, message", [
        (requests.exceptions.ConnectionError("refused"), "Connection failed"),
        (requests.exceptions.Timeout("slow"), "Request timed out"),
        (requests.exceptions.TooManyRedirects("loop"), "Request failed"),
    ])
    def test_transport_errors(self, http, session, error, message):
        """Test requests exceptions are wrapped in APIError."""
        session.request.side_effect = error
        with pytest.raises(APIError) as exc_info:
            http.request("GET", "sites")
        assert message in str(exc_info.value)


@pytest.fixture
def closing_server():
    """Local TCP server that accepts connections and hangs up before any TLS handshake."""
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(5)
    server.settimeout(0.2)
    stop = threading.Event()

    def serve():
        while not stop.is_set():
            try:
                conn, _ = server.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            conn.close()

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"https://127.0.0.1:{server.getsockname()[1]}/"
    stop.set()
    thread.join(timeout=2)
    server.close()


class TestTLSTransport:
    """Tests that send real requests through the TLS adapter."""

    @pytest.mark.parametrize("verify_ssl", [False, True])
    def test_handshake_failure_is_api_error(self, closing_server, verify_ssl):
        """Test a failed handshake surfaces as APIError with either verification setting."""
        config = ScaleDynamixConfig(api_uri=closing_server, timeout=5, verify_ssl=verify_ssl)
        client = ScaleDynamixClient(config)

        with pytest.raises(APIError) as exc_info:
            client.login("test-key")

        assert "Connection failed" in str(exc_info.value)
        assert not client.is_authenticated
