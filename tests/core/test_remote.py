"""
Tests for the remote template client.

HTTP is mocked at the requests.Session level.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from ignr.core.exceptions import ErrorCode, NetworkError
from ignr.core.templates import TemplateClient


BASE_URL = "https://templates.example.com/api"


def response(text="", status_code=200):
    resp = Mock()
    resp.text = text
    resp.status_code = status_code
    resp.ok = status_code < 400
    return resp


@pytest.fixture
def session():
    session = Mock()
    session.headers = {}
    return session


@pytest.fixture(autouse=True)
def no_sleep():
    with patch("ignr.utils.time.sleep") as sleep:
        yield sleep


class TestTemplateClient:
    """Test listing and fetching templates."""

    def test_user_agent_set(self, session):
        TemplateClient(BASE_URL, session=session)
        assert session.headers["User-Agent"].startswith("ignr/")

    def test_base_url_trailing_slash(self, session):
        session.get.return_value = response("python")
        client = TemplateClient(BASE_URL + "/", session=session)

        client.list_remote()

        session.get.assert_called_once_with(f"{BASE_URL}/list", timeout=30)

    def test_list_remote_parses_comma_and_newline(self, session):
        session.get.return_value = response("Python,rust\ngo,python\r\n\n")

        client = TemplateClient(BASE_URL, session=session)
        assert client.list_remote() == ["python", "rust", "go"]

    def test_list_remote_drops_path_like_names(self, session):
        session.get.return_value = response("python,../evil\nsub/dir,..\n")

        client = TemplateClient(BASE_URL, session=session)
        assert client.list_remote() == ["python"]

    def test_list_remote_http_error(self, session):
        session.get.return_value = response(status_code=503)

        with pytest.raises(NetworkError) as exc_info:
            TemplateClient(BASE_URL, session=session).list_remote()
        assert exc_info.value.error_code == ErrorCode.NETWORK_INVALID_RESPONSE
        assert exc_info.value.context.user_context["status_code"] == 503

    def test_fetch(self, session):
        session.get.return_value = response("target/\n")

        client = TemplateClient(BASE_URL, timeout=5, session=session)
        assert client.fetch("Rust") == "target/\n"
        session.get.assert_called_once_with(f"{BASE_URL}/rust", timeout=5)

    def test_fetch_not_found(self, session):
        session.get.return_value = response(status_code=404)
        assert TemplateClient(BASE_URL, session=session).fetch("cobol") is None

    def test_timeout(self, session):
        session.get.side_effect = requests.exceptions.Timeout("slow")

        client = TemplateClient(BASE_URL, max_retries=0, session=session)
        with pytest.raises(NetworkError) as exc_info:
            client.fetch("rust")
        assert exc_info.value.error_code == ErrorCode.NETWORK_TIMEOUT

    def test_connection_error_retried(self, session, no_sleep):
        session.get.side_effect = [requests.exceptions.ConnectionError("reset"), response("target/\n")]

        client = TemplateClient(BASE_URL, max_retries=1, session=session)
        assert client.fetch("rust") == "target/\n"
        assert session.get.call_count == 2
        no_sleep.assert_called_once()

    def test_retries_exhausted(self, session):
        session.get.side_effect = requests.exceptions.ConnectionError("down")

        client = TemplateClient(BASE_URL, max_retries=2, session=session)
        with pytest.raises(NetworkError) as exc_info:
            client.list_remote()
        assert exc_info.value.error_code == ErrorCode.NETWORK_CONNECTION_FAILED
        assert session.get.call_count == 3


class TestSync:
    """Test downloading the template collection."""

    def test_sync_counts_failures(self, session, tmp_path):
        pages = {
            f"{BASE_URL}/list": response("python,rust,elm"),
            f"{BASE_URL}/python": response("__pycache__/\n"),
            f"{BASE_URL}/rust": response(status_code=404),
        }

        def get(url, timeout):
            if url in pages:
                return pages[url]
            raise requests.exceptions.ConnectionError("refused")

        session.get.side_effect = get
        client = TemplateClient(BASE_URL, max_retries=0, session=session)

        result = client.sync(tmp_path / "templates")

        assert result.total == 3
        assert result.synced == 1
        assert result.failed == 2
        assert result.failures == ["rust", "elm"]
        assert (tmp_path / "templates" / "python.gitignore").read_text() == "__pycache__/\n"

    def test_sync_with_known_names(self, session, tmp_path):
        session.get.return_value = response("content\n")
        client = TemplateClient(BASE_URL, session=session)

        result = client.sync(tmp_path, ["go"])

        assert result.to_dict() == {"total": 1, "synced": 1, "failed": 0, "failures": []}
        session.get.assert_called_once_with(f"{BASE_URL}/go", timeout=30)

    def test_sync_skips_path_like_names(self, session, tmp_path):
        session.get.return_value = response("content\n")
        target = tmp_path / "templates"

        result = TemplateClient(BASE_URL, session=session).sync(target, ["../escape", "go"])

        assert result.total == 1
        assert (target / "go.gitignore").exists()
        assert not (tmp_path / "escape.gitignore").exists()

    def test_sync_list_failure_raises(self, session, tmp_path):
        session.get.return_value = response(status_code=500)

        with pytest.raises(NetworkError):
            TemplateClient(BASE_URL, session=session).sync(tmp_path)
