import os
from unittest.mock import patch

import pytest

from wpc.core.models import StatusKind
from wpc.core.pipeline import ClonePipeline, CloneState
from wpc.core.shellexec import CommandResult

DB_REQUEST = {
    'sourceDbHost': 'localhost',
    'sourceDbName': 'source_db',
    'sourceDbUser': 'wp',
    'sourceDbPass': 'secret',
    'targetDbHost': 'localhost',
    'targetDbName': 'target_db',
    'targetDbUser': 'wp',
    'targetDbPass': 'secret',
}


@pytest.fixture
def mysql():
    """Patch every MySQL entry point used by the pipeline."""
    created = set()

    def exists(ctrl, creds, name, **kwargs):
        return name == 'source_db' or name in created

    def dump(ctrl, creds, name, backup_file, **kwargs):
        with open(backup_file, 'w') as f:
            f.write('-- dump')
        return CommandResult(0, '', '')

    with patch('wpc.core.dbcloner.WPCMysql') as db_mysql, \
            patch('wpc.core.provisioner.WPCMysql') as prov_mysql, \
            patch('wpc.core.pipeline.WPCMysql') as verify_mysql:
        db_mysql.check_db_exists.side_effect = exists
        verify_mysql.check_db_exists.side_effect = exists
        db_mysql.create_database.side_effect = (
            lambda ctrl, creds, name, **kw: created.add(name))
        db_mysql.dump.side_effect = dump
        db_mysql.restore.return_value = CommandResult(0, '', '')
        prov_mysql.drop_database.side_effect = (
            lambda ctrl, creds, name, **kw: created.discard(name))
        yield {'db': db_mysql, 'provisioner': prov_mysql,
               'verify': verify_mysql, 'created': created}


@pytest.fixture
def wpcli():
    with patch('wpc.core.wpcli.WPCShellExec') as shell, \
            patch('wpc.core.provisioner.WPCFileUtils.chown'):
        shell.run.return_value = CommandResult(0, 'Success', '')
        shell.cmd_exec.return_value = True
        yield shell


def test_files_clone(controller, settings, base_path, wp_tree):
    wp_tree(base_path / 'site-a')

    outcome = ClonePipeline(controller, settings).run(
        {'cloneType': 'files', 'sourcePath': 'site-a', 'targetPath': 'site-b'})

    assert outcome.status.kind == StatusKind.SUCCESS
    assert outcome.status.message == 'WordPress site cloned successfully!'
    assert outcome.step_numbers == (0, 1, 2, 9, 10)
    assert outcome.errors == ()
    copied = [os.path.join(d, f) for d, _, files in os.walk(base_path / 'site-b')
              for f in files]
    assert len(copied) == 10


def test_same_database_fails_in_validation(controller, settings, mysql):
    raw = dict(DB_REQUEST, cloneType='database', targetDbName='source_db')

    pipeline = ClonePipeline(controller, settings)
    outcome = pipeline.run(raw)

    assert outcome.failed
    assert outcome.status.message == \
        'Error: Source and target database cannot be the same'
    assert outcome.errors == (outcome.status.message,)
    assert outcome.step_numbers == (0,)
    assert pipeline.state == CloneState.FAILED
    mysql['db'].check_db_exists.assert_not_called()


def test_full_clone_install_failure_rolls_back(controller, settings, base_path,
                                              wp_tree, mysql, wpcli):
    wp_tree(base_path / 'site-a')
    wpcli.run.return_value = CommandResult(1, '', 'Error: Unable to connect')
    raw = dict(DB_REQUEST, cloneType='full', sourcePath='site-a',
               targetPath='site-b')

    outcome = ClonePipeline(controller, settings).run(raw)

    assert outcome.failed
    assert outcome.status.message == 'Error: Failed to install WordPress core'
    assert 9 not in outcome.step_numbers
    assert outcome.step_numbers[-1] == 7
    assert not (base_path / 'site-b').exists()
    assert mysql['created'] == set()
    mysql['provisioner'].drop_database.assert_called_once()


def test_full_clone_success(controller, settings, base_path, wp_tree,
                            mysql, wpcli):
    wp_tree(base_path / 'site-a')
    raw = dict(DB_REQUEST, cloneType='full', sourcePath='site-a',
               targetPath='site-b')

    outcome = ClonePipeline(controller, settings).run(raw)

    assert outcome.status.kind == StatusKind.SUCCESS
    assert outcome.step_numbers == (0, 1, 2, 3, 4, 5, 6, 6, 6, 7, 7, 8, 9, 10)
    assert outcome.admin_url == 'http://example.com/site-b/wp-admin'
    assert outcome.to_dict()['adminUrl'] == outcome.admin_url
    assert mysql['created'] == {'target_db'}
    assert os.listdir(settings.storage_dir) == []


def test_database_clone(controller, settings, mysql):
    outcome = ClonePipeline(controller, settings).run(
        dict(DB_REQUEST, cloneType='database'))

    assert outcome.status.kind == StatusKind.SUCCESS
    assert outcome.steps[0].message == 'Validating database configuration...'
    assert outcome.step_numbers == (0, 3, 4, 5, 6, 9, 10)


def test_existing_target_database_blocks_file_copy(controller, settings,
                                                   base_path, wp_tree, mysql):
    wp_tree(base_path / 'site-a')
    mysql['created'].add('target_db')
    raw = dict(DB_REQUEST, cloneType='full', sourcePath='site-a',
               targetPath='site-b')

    outcome = ClonePipeline(controller, settings).run(raw)

    assert outcome.status.message == \
        "Error: Target database 'target_db' already exists."
    assert outcome.step_numbers == (0,)
    assert not (base_path / 'site-b').exists()


def test_same_path_makes_no_changes(controller, settings, base_path, wp_tree):
    wp_tree(base_path / 'site-a')
    before = sorted(os.listdir(base_path))

    outcome = ClonePipeline(controller, settings).run(
        {'cloneType': 'files', 'sourcePath': 'site-a', 'targetPath': 'site-a'})

    assert outcome.status.message == \
        'Error: Source and clone name cannot be the same'
    assert sorted(os.listdir(base_path)) == before


def test_validation_failures_are_repeatable(controller, settings):
    raw = dict(DB_REQUEST, cloneType='database', targetDbName='mysql')
    first = ClonePipeline(controller, settings).run(raw)
    second = ClonePipeline(controller, settings).run(raw)

    assert first.status.message == second.status.message
    assert first.to_dict() == second.to_dict()


def test_dry_run(controller, settings, base_path, wp_tree):
    wp_tree(base_path / 'site-a')

    outcome = ClonePipeline(controller, settings).run(
        {'cloneType': 'files', 'sourcePath': 'site-a', 'targetPath': 'site-b'},
        dry_run=True)

    assert outcome.status.kind == StatusKind.INFO
    assert outcome.step_numbers == (0,)
    assert not (base_path / 'site-b').exists()


def test_unexpected_error_is_reported(controller, settings, base_path, wp_tree):
    wp_tree(base_path / 'site-a')
    with patch('wpc.core.pipeline.FileCloner') as cloner:
        cloner.return_value.clone.side_effect = RuntimeError('kaboom')
        outcome = ClonePipeline(controller, settings).run(
            {'cloneType': 'files', 'sourcePath': 'site-a',
             'targetPath': 'site-b'})

    assert outcome.status.message == \
        'Error: Unexpected failure during copying files'
    assert 'kaboom' not in outcome.status.message


def test_wire_format(controller, settings):
    outcome = ClonePipeline(controller, settings).run({'cloneType': 'files'})

    assert outcome.to_dict() == {
        'steps': [{'step': 0,
                   'message': 'Validating source WordPress installation...'}],
        'status': {'message': "Error: Required field 'sourcePath' is missing",
                   'type': 'error'},
        'errors': ["Error: Required field 'sourcePath' is missing"],
    }


def test_target_inside_source_leaves_source_untouched(controller, settings,
                                                      base_path, wp_tree):
    source = wp_tree(base_path / 'site-a')
    before = sorted(p.relative_to(source) for p in source.rglob('*'))

    outcome = ClonePipeline(controller, settings).run(
        {'cloneType': 'files', 'sourcePath': 'site-a',
         'targetPath': 'site-a/clone'})

    assert outcome.failed
    assert 'cannot be inside source' in outcome.status.message
    assert outcome.step_numbers == (0,)
    assert sorted(p.relative_to(source) for p in source.rglob('*')) == before
