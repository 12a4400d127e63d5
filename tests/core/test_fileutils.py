import os
import stat

import pytest

from wpc.core.fileutils import FileCopyError, WPCFileUtils


def test_copyfiles_into_existing_directory(controller, tmp_path):
    src = tmp_path / "src"
    dest = tmp_path / "dest"
    (src / "wp-content").mkdir(parents=True)
    dest.mkdir()
    (src / "index.php").write_text("hello")
    (src / "wp-content" / "style.css").write_text("body {}")

    WPCFileUtils.copyfiles(controller, str(src), str(dest))

    assert (dest / "index.php").read_text() == "hello"
    assert (dest / "wp-content" / "style.css").read_text() == "body {}"


def test_copyfiles_collects_failures(controller, tmp_path):
    if os.geteuid() == 0:
        pytest.skip("root can read unreadable files")
    src = tmp_path / "src"
    src.mkdir()
    secret = src / "secret.php"
    secret.write_text("x")
    secret.chmod(0)
    (src / "ok.php").write_text("y")

    try:
        with pytest.raises(FileCopyError) as excinfo:
            WPCFileUtils.copyfiles(controller, str(src), str(tmp_path / "dest"))
    finally:
        secret.chmod(0o644)
    assert len(excinfo.value.failures) == 1
    assert (tmp_path / "dest" / "ok.php").exists()


def test_mkdir_existing_directory(controller, tmp_path):
    WPCFileUtils.mkdir(controller, str(tmp_path))
    assert tmp_path.is_dir()


def test_mkdir_existing_file(controller, tmp_path):
    path = tmp_path / "file"
    path.write_text("x")
    with pytest.raises(FileExistsError):
        WPCFileUtils.mkdir(controller, str(path))


def test_rm_refuses_base(controller, tmp_path):
    assert WPCFileUtils.rm(controller, str(tmp_path) + "/.", base=str(tmp_path)) is False
    assert tmp_path.is_dir()


def test_rm_tree_and_file(controller, tmp_path):
    site = tmp_path / "site"
    (site / "a").mkdir(parents=True)
    (tmp_path / "file.sql").write_text("--")

    assert WPCFileUtils.rm(controller, str(site), base=str(tmp_path))
    assert WPCFileUtils.rm(controller, str(tmp_path / "file.sql"))
    assert not site.exists()
    assert WPCFileUtils.rm(controller, str(site)) is False


def test_chmod_tree(controller, tmp_path):
    (tmp_path / "dir").mkdir(mode=0o700)
    (tmp_path / "dir" / "file.php").write_text("x")
    (tmp_path / "dir" / "file.php").chmod(0o600)

    WPCFileUtils.chmod_tree(controller, str(tmp_path))

    assert stat.S_IMODE((tmp_path / "dir").stat().st_mode) == 0o755
    assert stat.S_IMODE((tmp_path / "dir" / "file.php").stat().st_mode) == 0o644


@pytest.mark.parametrize("path, expected", [
    ("site", True),
    ("site/sub", True),
    (".", False),
    ("../other", False),
])
def test_is_within(tmp_path, path, expected):
    assert WPCFileUtils.is_within(str(tmp_path / path), str(tmp_path)) is expected
