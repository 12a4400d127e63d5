"""Immutable runtime settings resolved once per invocation"""
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple, Mapping

from wpc.core.models import DatabaseCredentials
from wpc.core.variables import WPCVar


# (attribute, config section, config key, environment suffix, default)
_SETTINGS_MAP = (
    ('base_path', 'clone', 'base_path', 'BASE_PATH', WPCVar.wpc_base_path),
    ('storage_dir', 'clone', 'storage_dir', 'STORAGE_DIR',
     WPCVar.wpc_storage_dir),
    ('command_timeout', 'clone', 'command_timeout', 'COMMAND_TIMEOUT',
     WPCVar.wpc_command_timeout),
    ('db_host', 'mysql', 'host', 'DB_HOST', WPCVar.wpc_mysql_host),
    ('db_user', 'mysql', 'user', 'DB_USER', WPCVar.wpc_mysql_user),
    ('db_password', 'mysql', 'password', 'DB_PASSWORD',
     WPCVar.wpc_mysql_password),
    ('db_admin_user', 'mysql', 'admin_user', 'DB_ADMIN_USER',
     WPCVar.wpc_mysql_admin_user),
    ('db_admin_password', 'mysql', 'admin_password', 'DB_ADMIN_PASSWORD',
     WPCVar.wpc_mysql_admin_password),
    ('connect_timeout', 'mysql', 'connect_timeout', None,
     WPCVar.wpc_mysql_connect_timeout),
    ('mysqldump_path', 'mysql', 'dump_path', None,
     WPCVar.wpc_mysqldump_path),
    ('mysql_client_path', 'mysql', 'client_path', None,
     WPCVar.wpc_mysql_client_path),
    ('web_user', 'wordpress', 'web_user', 'WEB_USER', WPCVar.wpc_web_user),
    ('web_group', 'wordpress', 'web_group', 'WEB_GROUP',
     WPCVar.wpc_web_group),
    ('base_url', 'wordpress', 'base_url', 'BASE_URL', WPCVar.wpc_base_url),
    ('admin_user', 'wordpress', 'admin_user', 'ADMIN_USER',
     WPCVar.wpc_wp_admin_user),
    ('admin_password', 'wordpress', 'admin_password', 'ADMIN_PASSWORD',
     WPCVar.wpc_wp_admin_password),
    ('admin_email', 'wordpress', 'admin_email', 'ADMIN_EMAIL',
     WPCVar.wpc_wp_admin_email),
    ('wpcli_path', 'wordpress', 'wpcli_path', 'WPCLI_PATH',
     WPCVar.wpc_wpcli_path),
    ('plugins_install', 'wordpress', 'plugins_install', None,
     WPCVar.wpc_plugins_install),
    ('plugins_remove', 'wordpress', 'plugins_remove', None,
     WPCVar.wpc_plugins_remove),
)


def _split_list(value) -> Tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(v).strip() for v in value if str(v).strip())
    return tuple(v.strip() for v in str(value).split(',') if v.strip())


def _coerce(default, value):
    if isinstance(default, list):
        return _split_list(value)
    if isinstance(default, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            return default
    return '' if value is None else str(value)


@dataclass(frozen=True)
class CloneSettings:
    base_path: str = WPCVar.wpc_base_path
    storage_dir: str = WPCVar.wpc_storage_dir
    command_timeout: int = WPCVar.wpc_command_timeout
    db_host: str = WPCVar.wpc_mysql_host
    db_user: str = WPCVar.wpc_mysql_user
    db_password: str = field(default=WPCVar.wpc_mysql_password, repr=False)
    db_admin_user: str = WPCVar.wpc_mysql_admin_user
    db_admin_password: str = field(
        default=WPCVar.wpc_mysql_admin_password, repr=False)
    connect_timeout: int = WPCVar.wpc_mysql_connect_timeout
    mysqldump_path: str = WPCVar.wpc_mysqldump_path
    mysql_client_path: str = WPCVar.wpc_mysql_client_path
    web_user: str = WPCVar.wpc_web_user
    web_group: str = WPCVar.wpc_web_group
    base_url: str = WPCVar.wpc_base_url
    admin_user: str = WPCVar.wpc_wp_admin_user
    admin_password: str = field(
        default=WPCVar.wpc_wp_admin_password, repr=False)
    admin_email: str = WPCVar.wpc_wp_admin_email
    wpcli_path: str = WPCVar.wpc_wpcli_path
    plugins_install: Tuple[str, ...] = tuple(WPCVar.wpc_plugins_install)
    plugins_remove: Tuple[str, ...] = tuple(WPCVar.wpc_plugins_remove)

    @property
    def timeout(self) -> Optional[int]:
        """Command timeout in seconds, None when unlimited."""
        return self.command_timeout if self.command_timeout > 0 else None

    def admin_credentials(self, target: DatabaseCredentials
                          ) -> DatabaseCredentials:
        """Credentials used to check, create and drop the target database.

        Falls back to the target credentials when no admin account is
        configured.
        """
        if self.db_admin_user:
            return DatabaseCredentials(host=target.host, name=target.name,
                                       user=self.db_admin_user,
                                       password=self.db_admin_password)
        return target

    @classmethod
    def from_app(cls, app, environ: Optional[Mapping[str, str]] = None):
        """Build settings from the cement config, then the environment."""
        environ = os.environ if environ is None else environ
        values = {}
        for attr, section, key, env, default in _SETTINGS_MAP:
            value = default
            if app is not None and app.config.has_section(section):
                if key in app.config.keys(section):
                    value = app.config.get(section, key)
            if env is not None:
                env_name = WPCVar.wpc_env_prefix + env
                if env_name in environ:
                    value = environ[env_name]
            values[attr] = _coerce(default, value)
        values['base_path'] = (values['base_path'].rstrip('/')
                               or WPCVar.wpc_base_path)
        return cls(**values)
