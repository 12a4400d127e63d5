from wpc.core.logging import Log


def test_valide_prints_and_logs(controller, capsys):
    Log.valide(controller, '[2] Copying WordPress files...')

    assert 'Copying WordPress files...' in capsys.readouterr().out
    controller.app.log.info.assert_called_once_with(
        '[2] Copying WordPress files...')


def test_failed_prints_reason(controller, capsys):
    Log.failed(controller, '[7] Installing WordPress core...',
               'Error: Failed to install WordPress core')

    out = capsys.readouterr().out
    assert 'KO' in out
    assert 'Error: Failed to install WordPress core' in out
    controller.app.log.error.assert_called_once()


def test_error_without_exit_keeps_app_open(controller):
    Log.error(controller, 'Unable to read clone request', exit=False)

    controller.app.log.error.assert_called_once()
    controller.app.close.assert_not_called()
