import os
from unittest.mock import patch

import pytest

from wpc.core.errors import FilesystemError
from wpc.core.filecloner import FileCloner
from wpc.core.fileutils import FileCopyError
from wpc.core.models import CloneOutcome


def relative_files(root):
    found = {}
    for dirpath, _, files in os.walk(root):
        for name in files:
            full = os.path.join(dirpath, name)
            with open(full, 'rb') as f:
                found[os.path.relpath(full, root)] = f.read()
    return found


def test_clone_copies_tree(controller, base_path, wp_tree):
    source = wp_tree(base_path / 'site-a')
    target = base_path / 'site-b'

    outcome = FileCloner(controller).clone(CloneOutcome(), str(source),
                                           str(target))

    assert outcome.step_numbers == (1, 2)
    assert relative_files(source) == relative_files(target)
    assert len(relative_files(target)) == 10


def test_clone_keeps_symlinks(controller, base_path, wp_tree):
    source = wp_tree(base_path / 'site-a')
    os.symlink('wp-config.php', source / 'link.php')
    target = base_path / 'site-b'

    FileCloner(controller).clone(CloneOutcome(), str(source), str(target))

    assert os.path.islink(target / 'link.php')
    assert os.readlink(target / 'link.php') == 'wp-config.php'


def test_target_is_a_file(controller, base_path, wp_tree):
    source = wp_tree(base_path / 'site-a')
    target = base_path / 'site-b'
    target.write_text('not a directory')

    with pytest.raises(FilesystemError) as excinfo:
        FileCloner(controller).clone(CloneOutcome(), str(source), str(target))
    assert 'Failed to create target directory' in str(excinfo.value)
    assert excinfo.value.outcome.step_numbers == (1,)


def test_partial_copy_reports_failures(controller, base_path, wp_tree):
    source = wp_tree(base_path / 'site-a')
    target = base_path / 'site-b'
    failures = [('a', 'b', 'Permission denied'), ('c', 'd', 'Permission denied')]

    with patch('wpc.core.filecloner.WPCFileUtils.copyfiles',
               side_effect=FileCopyError(failures)):
        with pytest.raises(FilesystemError) as excinfo:
            FileCloner(controller).clone(CloneOutcome(), str(source),
                                         str(target))

    assert 'Failed to copy 2 entries' in excinfo.value.message
    assert 'Permission denied' in excinfo.value.detail
    assert excinfo.value.outcome.step_numbers == (1, 2)
