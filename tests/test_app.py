"""HTTP エンドポイントのテスト（上流 API は requests.get をモック）."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from mindshare.app import app
from mindshare.cache import leaderboard_cache

SAMPLE_PAGE = [
    {"user": "bob", "score": 10},
    {"user": "alice", "score": 5},
    {"user": "carol", "score": 1},
]


def _fake_get(pages):
    """page パラメータに応じて pages[page-1] を返す requests.get の代替."""

    def fake_get(url, params=None, **kwargs):
        resp = MagicMock()
        page = params["page"]
        resp.json.return_value = pages[page - 1] if page <= len(pages) else []
        return resp

    return fake_get


@pytest.fixture(autouse=True)
def clear_cache():
    leaderboard_cache.clear()
    yield
    leaderboard_cache.clear()


@pytest.fixture
def client():
    app.config["TESTING"] = True
    return app.test_client()


class TestCheckEndpoint:
    """/api/check のテスト."""

    @patch("mindshare.fetcher.requests.get")
    def test_single_page_scenario(self, mock_get, client):
        mock_get.side_effect = _fake_get([SAMPLE_PAGE])

        resp = client.get("/api/check", query_string={"username": "alice"})

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["username"] == "alice"
        assert list(body["results"]) == ["24h", "7d", "month"]
        assert body["results"]["24h"] == {
            "totalFetched": 3,
            "rank100_mindshare": None,
            "found": True,
            "rank": 2,
            "mindshare": 5,
            "needed_mindshare": None,
        }

    @patch("mindshare.fetcher.requests.get")
    def test_username_normalized(self, mock_get, client):
        mock_get.side_effect = _fake_get([SAMPLE_PAGE])

        resp = client.get("/api/check", query_string={"username": " @Carol "})

        body = resp.get_json()
        assert body["username"] == "carol"
        assert body["results"]["7d"]["rank"] == 3

    @patch("mindshare.fetcher.requests.get")
    def test_not_found(self, mock_get, client):
        mock_get.side_effect = _fake_get([SAMPLE_PAGE])

        body = client.get("/api/check?username=dave").get_json()
        assert body["results"]["month"] == {
            "totalFetched": 3,
            "rank100_mindshare": None,
            "found": False,
        }

    @patch("mindshare.fetcher.requests.get")
    def test_cached_within_ttl(self, mock_get, client):
        """TTL 内の2回目は上流に問い合わせず同じ結果を返すこと."""
        mock_get.side_effect = _fake_get([SAMPLE_PAGE])

        first = client.get("/api/check?username=alice").get_json()
        calls_after_first = mock_get.call_count
        second = client.get("/api/check?username=alice").get_json()

        # 3期間 × (1ページ + 終端の空ページ)
        assert calls_after_first == 6
        assert mock_get.call_count == calls_after_first
        assert first["results"] == second["results"]

    @patch("mindshare.fetcher.requests.get")
    def test_upstream_failure_is_not_fatal(self, mock_get, client):
        mock_get.side_effect = requests.ConnectionError("down")

        resp = client.get("/api/check?username=alice")

        assert resp.status_code == 200
        assert resp.get_json()["results"]["24h"] == {
            "totalFetched": 0,
            "rank100_mindshare": None,
            "found": False,
        }

    @patch("mindshare.fetcher.requests.get")
    def test_missing_username(self, mock_get, client):
        for query in ("/api/check", "/api/check?username=", "/api/check?username=%20%20"):
            resp = client.get(query)
            assert resp.status_code == 400
            assert resp.get_json() == {"error": "missing username"}
        mock_get.assert_not_called()

    @patch("mindshare.app.check_user")
    def test_internal_error(self, mock_check, client):
        mock_check.side_effect = RuntimeError("boom")

        resp = client.get("/api/check?username=alice")

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "boom"}

    @patch("mindshare.fetcher.requests.get")
    def test_only_at_sign_username(self, mock_get, client):
        mock_get.side_effect = _fake_get([SAMPLE_PAGE])

        resp = client.get("/api/check?username=@")

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["username"] == ""
        assert body["results"]["24h"]["found"] is False

    @patch("mindshare.fetcher.requests.get")
    def test_worker_error_is_server_error(self, mock_get, client):
        """期間の取得処理から漏れた例外は 500 になること."""
        mock_get.side_effect = RuntimeError("unexpected")

        resp = client.get("/api/check?username=alice")

        assert resp.status_code == 500
        assert resp.get_json() == {"error": "unexpected"}


class TestHealth:
    def test_ok(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.data == b"OK"
