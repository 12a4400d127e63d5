from unittest.mock import Mock

import pytest

from wpc.core.settings import CloneSettings


class Dummy:
    """Minimal controller: only the app log is used by the core."""

    def __init__(self):
        self.app = Mock()


@pytest.fixture
def controller():
    return Dummy()


@pytest.fixture
def base_path(tmp_path):
    base = tmp_path / 'www'
    base.mkdir()
    return base


@pytest.fixture
def settings(tmp_path, base_path):
    return CloneSettings(
        base_path=str(base_path),
        storage_dir=str(tmp_path / 'private'),
        db_host='localhost',
        db_user='wp',
        db_password='secret',
        base_url='http://example.com',
    )


def make_wordpress_tree(root, files=10):
    """Create a small WordPress-like tree with a wp-config.php."""
    root.mkdir(parents=True, exist_ok=True)
    (root / 'wp-config.php').write_text(
        "<?php\n"
        "define( 'DB_NAME', 'source_db' );\n"
        "define( 'DB_USER', 'source_user' );\n"
        "define( 'DB_PASSWORD', 'source_pass' );\n"
        "define( 'DB_HOST', 'localhost' );\n"
        "$table_prefix = 'wp_';\n"
    )
    plugins = root / 'wp-content' / 'plugins'
    plugins.mkdir(parents=True)
    (plugins / 'hello.php').write_text('<?php // Hello Dolly')
    for index in range(files - 2):
        (root / 'wp-content' / f'file{index}.txt').write_text(f'content {index}')
    return root


@pytest.fixture
def wp_tree():
    return make_wordpress_tree
