"""Test fixtures: package archives built on the fly, isolated server config.

All tests should use these fixtures for consistency.
"""

import zipfile

import pytest

from wpup.config import WpupConfig

HELLO_PHP = """<?php
/*
Plugin Name: Hello World
Version: 1.2.3
*/
"""

HELLO_README = """=== Hello World ===
Stable tag: 1.2.3

Says hello.

== Changelog ==
1.2.3 - initial release
"""

PLUGIN_PHP = """<?php
/**
 * Plugin Name: Fancy Plugin
 * Plugin URI: https://example.com/fancy
 * Description: Does fancy things.
 * Version: 2.1
 * Author: Jane Doe
 * Author URI: https://example.com/jane
 * Depends: akismet, jetpack ,
 */
"""

THEME_CSS = """/*
Theme Name: Twenty Test
Theme URI: https://example.com/twenty-test
Author: Theme Co
Version: 2.0
Tags: <b>blue</b>, two-columns, ,
*/
body { color: #333; }
"""


def build_zip(path, files: dict):
    """Write *files* ({entry name: str | bytes}) into a new ZIP at *path*."""
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return path


@pytest.fixture
def make_zip(tmp_path):
    """Factory: make_zip("name.zip", {...}) -> path under tmp_path."""
    def _make(name: str, files: dict):
        return build_zip(tmp_path / name, files)
    return _make


@pytest.fixture
def hello_zip(make_zip):
    return make_zip("hello.zip", {
        "hello/": "",
        "hello/hello.php": HELLO_PHP,
        "hello/readme.txt": HELLO_README,
    })


@pytest.fixture
def server_config(tmp_path):
    """Config rooted at tmp_path/server with an empty packages/ directory."""
    server_dir = tmp_path / "server"
    (server_dir / "packages").mkdir(parents=True)
    return WpupConfig(server_dir=server_dir, _env_file=None)


@pytest.fixture
def install_package(server_config):
    """Factory: install_package("slug", {...}) writes packages/<slug>.zip."""
    def _install(slug: str, files: dict):
        return build_zip(server_config.packages_dir / f"{slug}.zip", files)
    return _install
