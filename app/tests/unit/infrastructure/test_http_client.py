"""Unit tests for the HTTP fetch facade."""

import pytest
import requests

from infrastructure.clients.http import HttpClient
from infrastructure.operations import OperationStatus


@pytest.fixture
def client(mock_session):
    return HttpClient(timeout=6, user_agent="ipwatch-test/1.0", session=mock_session)


@pytest.mark.unit
class TestHttpClient:
    def test_sets_user_agent(self, client, mock_session):
        assert mock_session.headers["User-Agent"] == "ipwatch-test/1.0"

    def test_get_returns_body_bytes(self, client, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, "203.0.113.7\n")

        result = client.get("https://ipv4.icanhazip.com")

        assert result.is_success
        assert result.data == b"203.0.113.7\n"
        mock_session.request.assert_called_once_with(
            method="GET",
            url="https://ipv4.icanhazip.com",
            data=None,
            params=None,
            timeout=6,
        )

    def test_get_passes_params_and_timeout(self, client, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, "<svg/>")

        client.get("https://maps.example", params={"lat": "1.00000"}, timeout=4)

        kwargs = mock_session.request.call_args.kwargs
        assert kwargs["params"] == {"lat": "1.00000"}
        assert kwargs["timeout"] == 4

    def test_post_form_sends_form_body(self, client, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, {"res": {}})

        client.post_form("https://geo.example", {"ip": "203.0.113.7"}, timeout=3)

        kwargs = mock_session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["data"] == {"ip": "203.0.113.7"}
        assert kwargs["timeout"] == 3

    def test_empty_200_body_is_success(self, client, mock_session, response_factory):
        mock_session.request.return_value = response_factory(200, b"")

        result = client.get("https://example.test")

        assert result.is_success
        assert result.data == b""

    def test_error_status_is_classified(self, client, mock_session, response_factory):
        mock_session.request.return_value = response_factory(503, "<html>down</html>")

        result = client.get("https://example.test")

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "HTTP_503"

    def test_non_200_success_code_is_not_success(
        self, client, mock_session, response_factory
    ):
        mock_session.request.return_value = response_factory(204)

        result = client.get("https://example.test")

        assert not result.is_success
        assert result.error_code == "HTTP_204"

    def test_timeout_never_raises(self, client, mock_session):
        mock_session.request.side_effect = requests.Timeout("timed out")

        result = client.get("https://example.test", timeout=1)

        assert result.error_code == "TIMEOUT"

    def test_connection_error_never_raises(self, client, mock_session):
        mock_session.request.side_effect = requests.ConnectionError("refused")

        result = client.get("https://example.test")

        assert result.error_code == "CONNECTION_ERROR"

    def test_close_closes_session(self, client, mock_session):
        client.close()
        mock_session.close.assert_called_once()
