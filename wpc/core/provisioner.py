"""
Post-copy WordPress provisioning with compensating rollback.

After files and database have been cloned, the copied tree is pointed at
the new database, reinstalled through WP-CLI, trimmed of default plugins
and, when a new domain is given, rewritten to that domain. If a required
sub-step fails the target directory and the target database are removed.
"""
import os
import re
import traceback

from wpc.core.dbvalidate import WPCDatabaseName
from wpc.core.errors import CloneError, ProvisioningError
from wpc.core.fileutils import WPCFileUtils
from wpc.core.logging import Log
from wpc.core.models import ProvisionResult, StepRecord
from wpc.core.mysql import (WPCMysql, MySQLConnectionError,
                            StatementExecutionError)
from wpc.core.shellexec import CommandExecutionError
from wpc.core.variables import WPCVar
from wpc.core.wpcli import WPCWpCli


WP_CONFIG = 'wp-config.php'
_TABLE_PREFIX_RE = re.compile(
    r"""\$table_prefix\s*=\s*(['"])([^'"]*)\1\s*;""")


def php_quote(value: str) -> str:
    """Single-quoted PHP string literal."""
    return "'" + value.replace('\\', '\\\\').replace("'", "\\'") + "'"


def _define_pattern(constant):
    return re.compile(
        r"""(define\s*\(\s*(['"])""" + re.escape(constant) +
        r"""\2\s*,\s*)(?:'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")(\s*\))""")


def rewrite_wp_config(content, values):
    """Replace the value of each define() named in values.

    Raises ProvisioningError when a constant is not defined.
    """
    for constant, value in values.items():
        pattern = _define_pattern(constant)
        if not pattern.search(content):
            raise ProvisioningError(
                f"{WP_CONFIG} does not define {constant}")
        literal = php_quote(value)
        content = pattern.sub(
            lambda m: m.group(1) + literal + m.group(3), content, count=1)
    return content


def read_table_prefix(content):
    match = _TABLE_PREFIX_RE.search(content)
    prefix = match.group(2) if match else 'wp_'
    return WPCDatabaseName.validate_table_prefix(prefix)


class WordPressProvisioner:
    """Configure a freshly cloned WordPress installation."""

    def __init__(self, controller, settings):
        self.controller = controller
        self.settings = settings
        self._steps = []

    def _step(self, number, message):
        self._steps.append(StepRecord(number, message))
        Log.debug(self.controller, message)

    def site_url(self, config) -> str:
        if config.new_domain:
            return config.new_domain
        return f"{self.settings.base_url.rstrip('/')}/{config.target_name}"

    def provision(self, target_path, target_db_name, config) -> ProvisionResult:
        """Provision the clone at target_path.

        Args:
            target_path: absolute path of the cloned tree
            target_db_name: name of the restored database
            config: the ResolvedCloneConfig of this run

        Returns:
            ProvisionResult. On failure the result carries the error
            message and rolled_back tells whether cleanup ran.
        """
        self._steps = []
        wpcli = WPCWpCli(self.controller, self.settings, target_path)
        try:
            self._step(6, 'Setting initial file permissions...')
            self._set_initial_permissions(target_path)

            self._step(6, 'Updating wp-config.php...')
            prefix = self._update_wp_config(target_path, target_db_name,
                                            config)

            self._step(7, 'Installing WordPress core...')
            self._install_core(wpcli, config)

            self._step(7, 'Configuring plugins...')
            self._configure_plugins(wpcli, target_path)

            if config.new_domain:
                self._step(7, 'Updating site URLs...')
                self._update_urls(target_db_name, config, prefix)

            self._step(8, 'Setting proper file permissions...')
            self._set_final_permissions(target_path)
        except Exception as e:
            if isinstance(e, CloneError):
                message, detail = e.message, e.detail
            else:
                message = 'Unexpected failure during provisioning'
                detail = traceback.format_exc()
            Log.error(self.controller, f"Provisioning failed: {message}",
                      exit=False)
            if detail:
                Log.debug(self.controller, detail)
            self._rollback(target_path, target_db_name, config)
            return ProvisionResult(success=False, message=message,
                                   steps=tuple(self._steps),
                                   rolled_back=True)

        admin_url = f"{self.site_url(config)}/wp-admin"
        Log.info(self.controller, f"WordPress ready, admin at {admin_url}")
        return ProvisionResult(
            success=True,
            message='WordPress cloning completed successfully',
            admin_url=admin_url, steps=tuple(self._steps))

    def _set_initial_permissions(self, target_path):
        try:
            WPCFileUtils.chmod_tree(self.controller, target_path,
                                    WPCVar.wpc_dir_mode,
                                    WPCVar.wpc_file_mode)
            WPCFileUtils.chown(self.controller, target_path,
                               self.settings.web_user,
                               self.settings.web_group, recursive=True)
        except (OSError, LookupError) as e:
            raise ProvisioningError("Failed to set file permissions",
                                    detail=str(e))

    def _update_wp_config(self, target_path, target_db_name, config):
        """Point wp-config.php at the target database, return the prefix."""
        config_path = os.path.join(target_path, WP_CONFIG)
        if not os.path.isfile(config_path):
            raise ProvisioningError(
                f"{WP_CONFIG} not found in {target_path}")
        try:
            with open(config_path, encoding='utf-8') as f:
                content = f.read()
            content = rewrite_wp_config(content, {
                'DB_NAME': target_db_name,
                'DB_USER': config.target_db.user,
                'DB_PASSWORD': config.target_db.password,
                'DB_HOST': config.target_db.host,
            })
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(content)
        except (OSError, UnicodeDecodeError) as e:
            raise ProvisioningError(f"Failed to update {WP_CONFIG}",
                                    detail=str(e))
        return read_table_prefix(content)

    def _install_core(self, wpcli, config):
        try:
            result = wpcli.run(
                'core install',
                url=self.site_url(config),
                title=config.target_name,
                admin_user=self.settings.admin_user,
                admin_email=self.settings.admin_email,
                prompt='admin_password',
                **{'skip-email': True},
                input_data=self.settings.admin_password + '\n')
        except CommandExecutionError as e:
            raise ProvisioningError("Failed to install WordPress core",
                                    detail=str(e))
        if not result.ok:
            raise ProvisioningError("Failed to install WordPress core",
                                    detail=result.stderr.strip())

    def _configure_plugins(self, wpcli, target_path):
        """Best effort: failures are logged, never raised."""
        actions = []
        for plugin in self.settings.plugins_install:
            actions.append(('plugin install', plugin,
                            f"Failed to install plugin {plugin}"))
        for plugin in self.settings.plugins_remove:
            actions.append(('plugin deactivate', plugin,
                            f"Failed to deactivate plugin {plugin}"))
            actions.append(('plugin delete', plugin,
                            f"Failed to delete plugin {plugin}"))
        for action, plugin, errormsg in actions:
            try:
                wpcli.try_run(action, plugin, errormsg=errormsg)
            except CommandExecutionError as e:
                Log.warn(self.controller, f"{errormsg}: {e}")

        plugin_dir = os.path.join(target_path, 'wp-content', 'plugins')
        for name in WPCVar.wpc_plugin_files_remove:
            path = os.path.join(plugin_dir, name)
            if not os.path.lexists(path):
                continue
            try:
                os.remove(path)
            except OSError as e:
                Log.warn(self.controller, f"Failed to remove {path}: {e}")

    def _update_urls(self, target_db_name, config, prefix):
        creds = config.target_db
        timeout = self.settings.connect_timeout
        options = f"`{prefix}options`"
        try:
            row = WPCMysql.fetch_one(
                self.controller, creds,
                f"SELECT option_value FROM {options} "
                "WHERE option_name = %s", ('home',),
                database=target_db_name, connect_timeout=timeout)
            old_url = row[0] if row else ''
            statements = [
                (f"UPDATE {options} SET option_value = %s "
                 "WHERE option_name IN ('home', 'siteurl')",
                 (config.new_domain,)),
            ]
            if old_url and old_url != config.new_domain:
                statements += [
                    (f"UPDATE `{prefix}posts` SET post_content = "
                     "REPLACE(post_content, %s, %s)",
                     (old_url, config.new_domain)),
                    (f"UPDATE `{prefix}comments` SET comment_content = "
                     "REPLACE(comment_content, %s, %s)",
                     (old_url, config.new_domain)),
                ]
            WPCMysql.run_statements(self.controller, creds, statements,
                                    database=target_db_name,
                                    connect_timeout=timeout)
        except (MySQLConnectionError, StatementExecutionError) as e:
            raise ProvisioningError("Failed to update site URLs",
                                    detail=str(e))
        Log.debug(self.controller,
                  f"Site URLs changed from {old_url or '(unset)'} "
                  f"to {config.new_domain}")

    def _set_final_permissions(self, target_path):
        try:
            WPCFileUtils.chown(self.controller, target_path,
                               self.settings.web_user,
                               self.settings.web_group, recursive=True)
        except (OSError, LookupError) as e:
            Log.warn(self.controller, f"Failed to set ownership: {e}")
        config_path = os.path.join(target_path, WP_CONFIG)
        try:
            WPCFileUtils.chmod(self.controller, config_path,
                               WPCVar.wpc_wpconfig_mode)
        except OSError as e:
            Log.warn(self.controller,
                     f"Failed to restrict {WP_CONFIG}: {e}")

    def _rollback(self, target_path, target_db_name, config):
        """Remove the target tree and drop the target database.

        Errors are logged so they do not hide the provisioning failure.
        """
        Log.warn(self.controller, f"Rolling back clone at {target_path}")
        try:
            WPCFileUtils.rm(self.controller, target_path,
                            base=self.settings.base_path)
        except OSError as e:
            Log.error(self.controller,
                      f"Rollback could not remove {target_path}: {e}",
                      exit=False)
        admin = self.settings.admin_credentials(config.target_db)
        try:
            WPCMysql.drop_database(self.controller, admin, target_db_name,
                                   connect_timeout=self.settings.connect_timeout)
        except (MySQLConnectionError, StatementExecutionError) as e:
            Log.error(self.controller,
                      f"Rollback could not drop {target_db_name}: {e}",
                      exit=False)
