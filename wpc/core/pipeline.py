"""Sequences the clone phases and produces the final outcome"""
import os
import traceback

from wpc.core.dbcloner import DatabaseCloner
from wpc.core.errors import CloneError, DatabaseError
from wpc.core.filecloner import FileCloner
from wpc.core.logging import Log
from wpc.core.models import CloneOutcome
from wpc.core.mysql import (WPCMysql, MySQLConnectionError,
                            StatementExecutionError)
from wpc.core.provisioner import WordPressProvisioner
from wpc.core.resolver import ConfigResolver
from wpc.core.validator import ConfigValidator


class CloneState:
    VALIDATING = 'validating'
    COPYING_FILES = 'copying files'
    CLONING_DATABASE = 'cloning database'
    PROVISIONING = 'provisioning'
    VERIFYING = 'verifying'
    DONE = 'done'
    FAILED = 'failed'


SUCCESS_MESSAGE = 'WordPress site cloned successfully!'
DRY_RUN_MESSAGE = 'Validation passed, no changes were made'


class ClonePipeline:
    """Run one clone request end to end.

    ``run`` never raises: every failure becomes an error status on the
    returned CloneOutcome, with the steps recorded up to that point.
    """

    def __init__(self, controller, settings):
        self.controller = controller
        self.settings = settings
        self.state = None

    def run(self, raw, dry_run=False) -> CloneOutcome:
        outcome = CloneOutcome()
        config = None
        self.state = CloneState.VALIDATING
        try:
            config = ConfigResolver(self.settings).resolve(raw)
            if config.needs_files or not config.needs_database:
                message = 'Validating source WordPress installation...'
            else:
                message = 'Validating database configuration...'
            outcome = outcome.add_step(0, message)

            ConfigValidator(self.controller, self.settings).validate(config)
            db_cloner = DatabaseCloner(self.controller, self.settings)
            if config.needs_database:
                db_cloner.check_databases(config)
            if dry_run:
                self.state = CloneState.DONE
                return outcome.inform(DRY_RUN_MESSAGE)

            if config.needs_files:
                self.state = CloneState.COPYING_FILES
                outcome = FileCloner(self.controller).clone(
                    outcome, config.source_path, config.target_path)

            if config.needs_database:
                self.state = CloneState.CLONING_DATABASE
                outcome = db_cloner.clone(outcome, config)

            if config.needs_provisioning:
                self.state = CloneState.PROVISIONING
                result = WordPressProvisioner(
                    self.controller, self.settings).provision(
                        config.target_path, config.target_db.name, config)
                outcome = outcome.extend(result.steps)
                if not result.success:
                    return self._fail(outcome, result.message, config)
                outcome = outcome.with_admin_url(result.admin_url)

            self.state = CloneState.VERIFYING
            outcome = outcome.add_step(9, 'Verifying cloned installation...')
            self._verify(config)

            self.state = CloneState.DONE
            outcome = outcome.add_step(10, 'Clone completed successfully!')
            Log.info(self.controller, SUCCESS_MESSAGE)
            return outcome.succeed(SUCCESS_MESSAGE)

        except CloneError as e:
            if e.outcome is not None:
                outcome = e.outcome
            if e.detail:
                Log.debug(self.controller, f"{type(e).__name__}: {e.detail}")
            return self._fail(outcome, e.message, config)
        except Exception as e:
            Log.debug(self.controller, traceback.format_exc())
            Log.debug(self.controller, f"{type(e).__name__}: {e}")
            return self._fail(
                outcome, f"Unexpected failure during {self.state}", config)

    def _verify(self, config):
        if config.needs_files and not os.path.isdir(config.target_path):
            raise CloneError(
                f"Cloned directory {config.target_path} is missing")
        if config.needs_database:
            creds = self.settings.admin_credentials(config.target_db)
            try:
                exists = WPCMysql.check_db_exists(
                    self.controller, creds, config.target_db.name,
                    connect_timeout=self.settings.connect_timeout)
            except (MySQLConnectionError, StatementExecutionError) as e:
                raise DatabaseError("Failed to verify target database",
                                    detail=str(e))
            if not exists:
                raise DatabaseError(
                    f"Target database '{config.target_db.name}' is missing")

    def _fail(self, outcome, message, config):
        failed_during = self.state
        self.state = CloneState.FAILED
        context = config.context() if config is not None else {}
        Log.error(self.controller,
                  f"Clone failed during {failed_during}: {message} "
                  f"{context}", exit=False)
        return outcome.fail(message)
