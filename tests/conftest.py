"""Pytest configuration and fixtures for wp-limit-fixer tests."""

import logging
from pathlib import Path
from typing import List

import pytest

PHP_INI = """\
[PHP]
; Maximum allowed size for uploaded files.
; http://php.net/upload-max-filesize
upload_max_filesize = 2M

; Maximum size of POST data that PHP will accept.
post_max_size = 8M

memory_limit = 128M
max_execution_time = 30
max_input_time = 60
"""

WP_CONFIG = """\
<?php
define( 'DB_NAME', 'wordpress' );
define('WP_CACHE', true);

/* Add any custom values between this line and the "stop editing" line. */

/* That's all, stop editing! Happy blogging. */

/** Absolute path to the WordPress directory. */
if ( ! defined( 'ABSPATH' ) ) {
	define( 'ABSPATH', __DIR__ . '/' );
}
require_once ABSPATH . 'wp-settings.php';
"""

EVASIVE_CONF = """\
<IfModule mod_evasive20.c>
    DOSHashTableSize    3097
    DOSPageCount        2
    DOSSiteCount        50
    DOSPageInterval     1
    DOSSiteInterval     1
    DOSBlockingPeriod   10
</IfModule>
"""


class FakeSystem:
    """SystemManager double that records every call."""

    def __init__(self, modules=None, synchronized=True, fail_on=()):
        self.modules: List[str] = list(modules or [])
        self.synchronized = synchronized
        self.fail_on = set(fail_on)
        self.calls: List[tuple] = []

    def _record(self, name, *args):
        from wp_limit_fixer.errors import ServiceError

        self.calls.append((name,) + args)
        if name in self.fail_on:
            raise ServiceError(f"{name} failed")

    def query_enabled_modules(self):
        self.calls.append(("query_enabled_modules",))
        return list(self.modules)

    def disable_module(self, name):
        self._record("disable_module", name)

    def ensure_package(self, name):
        self._record("ensure_package", name)

    def enable_service(self, name):
        self._record("enable_service", name)

    def restart_service(self, name):
        self._record("restart_service", name)

    def clock_synchronized(self):
        self.calls.append(("clock_synchronized",))
        return self.synchronized

    def called(self, name) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def php_ini(tmp_path: Path) -> Path:
    path = tmp_path / "php.ini"
    path.write_text(PHP_INI)
    return path


@pytest.fixture
def wp_config(tmp_path: Path) -> Path:
    path = tmp_path / "wp-config.php"
    path.write_text(WP_CONFIG)
    return path


@pytest.fixture
def evasive_conf(tmp_path: Path) -> Path:
    path = tmp_path / "evasive.conf"
    path.write_text(EVASIVE_CONF)
    return path


@pytest.fixture
def fake_system() -> FakeSystem:
    return FakeSystem()


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by setup_logger so file handles do not leak between tests."""
    yield
    logger = logging.getLogger("wp_limit_fixer")
    for h in logger.handlers[:]:
        logger.removeHandler(h)
        h.close()


def backups_of(path: Path) -> List[Path]:
    return sorted(path.parent.glob(f"{path.name}.backup.*"))
