"""Copies a source database into a newly created target database"""
import os
import tempfile
import time

from wpc.core.errors import DatabaseError
from wpc.core.logging import Log
from wpc.core.mysql import (WPCMysql, MySQLConnectionError,
                            StatementExecutionError)
from wpc.core.shellexec import CommandExecutionError


class DatabaseCloner:
    """Dump the source database and restore it into a new target.

    The dump lives in a private per-run file that is removed whether or
    not the restore succeeds.
    """

    def __init__(self, controller, settings):
        self.controller = controller
        self.settings = settings

    def _exists(self, creds, name):
        try:
            return WPCMysql.check_db_exists(
                self.controller, creds, name,
                connect_timeout=self.settings.connect_timeout)
        except MySQLConnectionError as e:
            raise DatabaseError(
                f"Failed to connect to database server: {creds.host}",
                detail=str(e))
        except StatementExecutionError as e:
            raise DatabaseError(
                f"Failed to query database server: {creds.host}",
                detail=str(e))

    def check_databases(self, config):
        """Source must exist, target must not. Read-only."""
        source = config.source_db
        try:
            source_exists = WPCMysql.check_db_exists(
                self.controller, source, source.name,
                connect_timeout=self.settings.connect_timeout)
        except MySQLConnectionError as e:
            raise DatabaseError(
                f"Failed to connect to database server: {source.host}",
                detail=str(e))
        except StatementExecutionError as e:
            Log.debug(self.controller, str(e))
            source_exists = False
        if not source_exists:
            raise DatabaseError(
                f"Source database '{source.name}' does not exist or is "
                "not accessible.")

        admin = self.settings.admin_credentials(config.target_db)
        if self._exists(admin, config.target_db.name):
            raise DatabaseError(
                f"Target database '{config.target_db.name}' already exists.")

    def _backup_file(self, source_name):
        os.makedirs(self.settings.storage_dir, mode=0o700, exist_ok=True)
        fd, path = tempfile.mkstemp(
            prefix=f"wp_clone_backup_{source_name}_{time.time_ns()}_",
            suffix='.sql', dir=self.settings.storage_dir)
        os.close(fd)
        return path

    def _run_tool(self, call, message, *args, **kwargs):
        try:
            result = call(self.controller, *args, **kwargs)
        except CommandExecutionError as e:
            raise DatabaseError(message, detail=str(e))
        if not result.ok:
            raise DatabaseError(message, detail=result.stderr.strip())
        return result

    def clone(self, outcome, config):
        """Run steps 3 to 6, returning the extended outcome."""
        source, target = config.source_db, config.target_db
        admin = self.settings.admin_credentials(target)

        outcome = outcome.add_step(3, 'Validating source database connection...')
        try:
            self.check_databases(config)
        except DatabaseError as e:
            e.outcome = outcome
            raise

        outcome = outcome.add_step(4, 'Creating database backup...')
        try:
            backup_file = self._backup_file(source.name)
        except OSError as e:
            raise DatabaseError("Failed to create database backup",
                                detail=str(e), outcome=outcome)
        try:
            self._run_tool(WPCMysql.dump,
                           f"Failed to create backup of database "
                           f"'{source.name}'",
                           source, source.name, backup_file,
                           dump_path=self.settings.mysqldump_path,
                           timeout=self.settings.timeout,
                           directory=self.settings.storage_dir)

            outcome = outcome.add_step(5, 'Creating target database...')
            if self._exists(admin, target.name):
                raise DatabaseError(
                    f"Target database '{target.name}' already exists.")
            try:
                WPCMysql.create_database(
                    self.controller, admin, target.name,
                    connect_timeout=self.settings.connect_timeout)
            except (MySQLConnectionError, StatementExecutionError) as e:
                raise DatabaseError(
                    f"Failed to create target database '{target.name}'",
                    detail=str(e))

            outcome = outcome.add_step(6, 'Importing database to target...')
            self._run_tool(WPCMysql.restore,
                           f"Failed to import database into "
                           f"'{target.name}'",
                           target, target.name, backup_file,
                           client_path=self.settings.mysql_client_path,
                           timeout=self.settings.timeout,
                           directory=self.settings.storage_dir)
        except DatabaseError as e:
            e.outcome = outcome
            raise
        finally:
            if os.path.exists(backup_file):
                Log.debug(self.controller, f"Removing {backup_file}")
                os.remove(backup_file)

        Log.info(self.controller,
                 f"Database {source.name} cloned to {target.name}")
        return outcome
