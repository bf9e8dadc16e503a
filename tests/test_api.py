"""API integration tests: the update endpoint, assets and health.

Coverage:
  GET /?action=get_metadata  — metadata JSON, download_url, banners, icons
  GET /?action=download      — ZIP body, Content-Disposition, Cache-Control
  GET /index.php             — same handler
  Validation                 — missing action/slug → 400, unknown slug → 404,
                               invalid package → 500, unknown action → 400
  GET /health                — directory checks
"""

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from wpup.api.main import create_app
from wpup.config import WpupConfig
from wpup.server.update_server import UpdateServer

from tests.conftest import HELLO_PHP, HELLO_README

HELLO_FILES = {"hello/hello.php": HELLO_PHP, "hello/readme.txt": HELLO_README}


# ── Fixtures ───────────────────────────────────────────────────────────────────

@pytest.fixture
def client(server_config, install_package):
    install_package("hello", HELLO_FILES)
    return TestClient(create_app(server_config))


def _make_client(cfg: WpupConfig, **kwargs) -> TestClient:
    return TestClient(create_app(cfg, **kwargs))


# ── get_metadata ───────────────────────────────────────────────────────────────

class TestGetMetadata:

    def test_returns_metadata(self, client):
        resp = client.get("/", params={"action": "get_metadata", "slug": "hello"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "Hello World"
        assert data["version"] == "1.2.3"
        assert data["slug"] == "hello"
        assert data["sections"] == {"changelog": "<p>1.2.3 - initial release</p>"}
        assert data["download_url"] == "http://testserver/?action=download&slug=hello"
        assert float(data["request_time_elapsed"]) >= 0

    def test_unset_fields_omitted(self, client):
        data = client.get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert "banners" not in data
        assert "icons" not in data
        assert "upgrade_notice" not in data
        assert None not in data.values()

    def test_index_php_alias(self, client):
        resp = client.get("/index.php", params={"action": "get_metadata", "slug": "hello"})
        assert resp.status_code == 200
        assert resp.json()["name"] == "Hello World"

    def test_configured_server_url(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        cfg = server_config.model_copy(update={"server_url": "https://updates.example.com/api/?key=abc"})
        data = _make_client(cfg).get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert data["download_url"] == "https://updates.example.com/api/?key=abc&action=download&slug=hello"

    def test_upgrade_notice_from_readme(self, server_config, install_package):
        readme = HELLO_README + "\n== Upgrade Notice ==\n= 1.2.3 =\nFixes a crash.\n"
        install_package("hello", {"hello/hello.php": HELLO_PHP, "hello/readme.txt": readme})
        data = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert data["upgrade_notice"] == "Fixes a crash."

    def test_unwritable_cache_still_serves(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        server_config.cache_dir.write_text("not a directory")
        resp = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "hello"})
        assert resp.status_code == 200
        assert resp.json()["version"] == "1.2.3"

    def test_metadata_cached(self, client, server_config):
        client.get("/", params={"action": "get_metadata", "slug": "hello"})
        cached = list(server_config.cache_dir.glob("metadata-hello-*.txt"))
        assert len(cached) == 1


# ── Assets ─────────────────────────────────────────────────────────────────────

class TestAssets:

    def test_banners_and_icons(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        server_config.banners_dir.mkdir()
        server_config.icons_dir.mkdir()
        (server_config.banners_dir / "hello-772x250.png").write_bytes(b"png")
        (server_config.banners_dir / "hello-1544x500.jpg").write_bytes(b"jpg")
        (server_config.icons_dir / "hello-128x128.png").write_bytes(b"png")
        (server_config.icons_dir / "hello.svg").write_text("<svg/>")

        client = _make_client(server_config)
        data = client.get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert data["banners"] == {
            "low": "http://testserver/banners/hello-772x250.png",
            "high": "http://testserver/banners/hello-1544x500.jpg",
        }
        assert data["icons"] == {
            "1x": "http://testserver/icons/hello-128x128.png",
            "svg": "http://testserver/icons/hello.svg",
        }
        assert client.get("/banners/hello-772x250.png").content == b"png"

    def test_png_preferred_over_jpg(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        server_config.banners_dir.mkdir()
        (server_config.banners_dir / "hello-772x250.jpg").write_bytes(b"jpg")
        (server_config.banners_dir / "hello-772x250.png").write_bytes(b"png")
        data = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert data["banners"] == {"low": "http://testserver/banners/hello-772x250.png"}

    def test_high_banner_needs_low(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        server_config.banners_dir.mkdir()
        (server_config.banners_dir / "hello-1544x500.png").write_bytes(b"png")
        data = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "hello"}).json()
        assert "banners" not in data


# ── download ───────────────────────────────────────────────────────────────────

class TestDownload:

    def test_streams_zip(self, client, server_config):
        resp = client.get("/", params={"action": "download", "slug": "hello"})
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/zip"
        assert 'filename="hello.zip"' in resp.headers["content-disposition"]
        assert resp.content == (server_config.packages_dir / "hello.zip").read_bytes()
        assert "cache-control" not in resp.headers

    def test_cache_control(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        cfg = server_config.model_copy(update={"download_max_age": 3600})
        resp = _make_client(cfg).get("/", params={"action": "download", "slug": "hello"})
        assert resp.headers["cache-control"] == "public, max-age=3600"


# ── Validation ─────────────────────────────────────────────────────────────────

class TestValidation:

    def test_missing_action(self, client):
        resp = client.get("/", params={"slug": "hello"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "You must specify an action."

    def test_missing_slug(self, client):
        resp = client.get("/", params={"action": "get_metadata"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "You must specify a package slug."

    def test_unknown_slug(self, client):
        resp = client.get("/", params={"action": "get_metadata", "slug": "nope"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Package not found"

    def test_path_traversal_slug(self, client):
        resp = client.get("/", params={"action": "download", "slug": "../hello"})
        assert resp.status_code == 404

    def test_unknown_action(self, client):
        resp = client.get("/", params={"action": "delete", "slug": "hello"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == 'Invalid action "delete".'

    def test_invalid_package(self, server_config, install_package):
        install_package("broken", {"broken/notes.txt": "no header"})
        resp = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "broken"})
        assert resp.status_code == 500
        assert resp.json()["detail"].startswith('Package "broken" exists, but it is not a valid plugin or theme.')

    def test_not_a_zip_is_not_found(self, server_config):
        (server_config.packages_dir / "junk.zip").write_bytes(b"junk")
        resp = _make_client(server_config).get("/", params={"action": "get_metadata", "slug": "junk"})
        assert resp.status_code == 404


# ── Hooks and request log ──────────────────────────────────────────────────────

class LicensedServer(UpdateServer):
    def check_authorization(self, request):
        if request.action == "download" and request.param("license_key") != "secret":
            raise HTTPException(status_code=403, detail="License required")

    def filter_metadata(self, meta, request):
        meta = super().filter_metadata(meta, request)
        meta.pop("sections", None)
        return meta


class TestHooksAndLogging:

    def test_custom_server(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        client = _make_client(server_config, server=LicensedServer(server_config))
        assert client.get("/", params={"action": "download", "slug": "hello"}).status_code == 403
        ok = client.get("/", params={"action": "download", "slug": "hello", "license_key": "secret"})
        assert ok.status_code == 200
        assert "sections" not in client.get("/", params={"action": "get_metadata", "slug": "hello"}).json()

    def test_requests_logged(self, client, server_config):
        client.get(
            "/",
            params={"action": "get_metadata", "slug": "hello", "installed_version": "1.0"},
            headers={"User-Agent": "WordPress/6.5; https://site.example"},
        )
        line = (server_config.logs_dir / "request.log").read_text().strip()
        assert "\tGET \tget_metadata\thello\t1.0\t6.5\thttps://site.example\t" in line

    def test_failed_requests_logged_too(self, client, server_config):
        client.get("/", params={"action": "get_metadata", "slug": "nope"})
        assert "\tnope\t" in (server_config.logs_dir / "request.log").read_text()

    def test_logging_disabled(self, server_config, install_package):
        install_package("hello", HELLO_FILES)
        cfg = server_config.model_copy(update={"log_requests": False})
        _make_client(cfg).get("/", params={"action": "get_metadata", "slug": "hello"})
        assert not cfg.logs_dir.exists()


# ── Health ─────────────────────────────────────────────────────────────────────

class TestHealth:

    def test_ok(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert data["services"] == {"packages": True, "cache": True}
        assert data["packages"] == 1
        assert "version" in data

    def test_degraded_without_package_dir(self, tmp_path):
        cfg = WpupConfig(server_dir=tmp_path / "empty", _env_file=None)
        data = _make_client(cfg).get("/health").json()
        assert data["status"] == "degraded"
        assert data["services"]["packages"] is False
        assert data["packages"] is None
