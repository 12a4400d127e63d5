"""wpclone MySQL utilities"""
import os
import tempfile
from contextlib import contextmanager

import pymysql
from pymysql.err import MySQLError

from wpc.core.logging import Log
from wpc.core.shellexec import WPCShellExec


class MySQLConnectionError(Exception):
    """Custom Exception when MySQL server Not Connected"""
    pass


class StatementExecutionError(Exception):
    """Custom Exception when any Query Fails to execute"""
    pass


def split_host(host):
    """Split 'host[:port]' into (host, port)."""
    host = (host or 'localhost').strip()
    if host.count(':') == 1:
        name, _, port = host.partition(':')
        if port.isdigit():
            return name or 'localhost', int(port)
    return host, 3306


def quote_identifier(name):
    """Backtick-quote an already validated identifier."""
    return '`' + name.replace('`', '``') + '`'


class WPCMysql:
    """Method for MySQL connection and dump/restore"""

    @staticmethod
    def connect(self, creds, database=None, connect_timeout=10):
        """Open a PyMySQL connection with the given credentials."""
        host, port = split_host(creds.host)
        try:
            return pymysql.connect(host=host, port=port,
                                   user=creds.user,
                                   password=creds.password,
                                   database=database,
                                   charset='utf8mb4',
                                   connect_timeout=connect_timeout,
                                   autocommit=True)
        except MySQLError as e:
            Log.debug(self, f"Unable to connect to {host}:{port} as "
                            f"{creds.user}: {e}")
            raise MySQLConnectionError(str(e))

    @staticmethod
    def execute(self, creds, statement, params=None, database=None,
                connect_timeout=10):
        """Run one statement, return the affected row count."""
        connection = WPCMysql.connect(self, creds, database=database,
                                      connect_timeout=connect_timeout)
        try:
            with connection.cursor() as cursor:
                Log.debug(self, f"Executing MySQL statement: {statement}")
                return cursor.execute(statement, params)
        except MySQLError as e:
            Log.debug(self, str(e))
            raise StatementExecutionError(str(e))
        finally:
            connection.close()

    @staticmethod
    def fetch_one(self, creds, query, params=None, database=None,
                  connect_timeout=10):
        connection = WPCMysql.connect(self, creds, database=database,
                                      connect_timeout=connect_timeout)
        try:
            with connection.cursor() as cursor:
                Log.debug(self, f"Executing MySQL query: {query}")
                cursor.execute(query, params)
                return cursor.fetchone()
        except MySQLError as e:
            Log.debug(self, str(e))
            raise StatementExecutionError(str(e))
        finally:
            connection.close()

    @staticmethod
    def check_db_exists(self, creds, dbname, connect_timeout=10):
        """Parameterized lookup of dbname in information_schema."""
        row = WPCMysql.fetch_one(
            self, creds,
            "SELECT SCHEMA_NAME FROM information_schema.SCHEMATA "
            "WHERE SCHEMA_NAME = %s",
            (dbname,), connect_timeout=connect_timeout)
        return row is not None

    @staticmethod
    def create_database(self, creds, dbname, connect_timeout=10):
        WPCMysql.execute(
            self, creds,
            f"CREATE DATABASE {quote_identifier(dbname)} "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci",
            connect_timeout=connect_timeout)

    @staticmethod
    def drop_database(self, creds, dbname, connect_timeout=10):
        WPCMysql.execute(
            self, creds,
            f"DROP DATABASE IF EXISTS {quote_identifier(dbname)}",
            connect_timeout=connect_timeout)

    @staticmethod
    @contextmanager
    def credentials_file(creds, directory=None):
        """Write a private [client] option file, removed on exit.

        Keeps passwords off the command line of mysqldump and mysql.
        """
        host, port = split_host(creds.host)
        fd, path = tempfile.mkstemp(prefix='wpc_client_', suffix='.cnf',
                                    dir=directory)
        try:
            os.chmod(path, 0o600)
            with os.fdopen(fd, 'w') as cnf:
                cnf.write("[client]\n")
                cnf.write(f"host={host}\n")
                cnf.write(f"port={port}\n")
                cnf.write(f"user={creds.user}\n")
                password = creds.password.replace('\\', '\\\\') \
                    .replace('"', '\\"')
                cnf.write(f'password="{password}"\n')
            yield path
        finally:
            if os.path.exists(path):
                os.remove(path)

    @staticmethod
    def dump(self, creds, dbname, backup_file, dump_path='mysqldump',
             timeout=None, directory=None):
        """Dump dbname into backup_file, returning the CommandResult."""
        with WPCMysql.credentials_file(creds, directory) as cnf:
            args = [dump_path, f"--defaults-extra-file={cnf}",
                    '--single-transaction', '--quick', '--add-drop-table',
                    '--hex-blob', '--routines', '--triggers',
                    f"--result-file={backup_file}", dbname]
            return WPCShellExec.run(self, args, timeout=timeout)

    @staticmethod
    def restore(self, creds, dbname, backup_file, client_path='mysql',
                timeout=None, directory=None):
        """Replay backup_file into dbname, returning the CommandResult."""
        with WPCMysql.credentials_file(creds, directory) as cnf:
            args = [client_path, f"--defaults-extra-file={cnf}", dbname]
            return WPCShellExec.run(self, args, stdin_path=backup_file,
                                    timeout=timeout)

    @staticmethod
    def run_statements(self, creds, statements, database=None,
                       connect_timeout=10):
        """Execute (statement, params) pairs in one transaction."""
        connection = WPCMysql.connect(self, creds, database=database,
                                      connect_timeout=connect_timeout)
        try:
            connection.begin()
            with connection.cursor() as cursor:
                for statement, params in statements:
                    Log.debug(self, f"Executing MySQL statement: {statement}")
                    cursor.execute(statement, params)
            connection.commit()
        except MySQLError as e:
            connection.rollback()
            Log.debug(self, str(e))
            raise StatementExecutionError(str(e))
        finally:
            connection.close()
