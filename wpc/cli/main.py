"""wpclone main application entry point."""
import sys

from cement import App, TestApp, init_defaults
from cement.core.exc import CaughtSignal

from wpc.cli.controllers.base import WPCBaseController
from wpc.cli.plugins.site_clone import WPCSiteCloneController
from wpc.core.variables import WPCVar

# application default.  these are all overridden by the
# configuration files.
CONFIG = init_defaults('wpc', 'clone', 'mysql', 'wordpress', 'log.logging')

CONFIG['clone']['base_path'] = WPCVar.wpc_base_path
CONFIG['clone']['storage_dir'] = WPCVar.wpc_storage_dir
CONFIG['clone']['command_timeout'] = WPCVar.wpc_command_timeout

CONFIG['mysql']['host'] = WPCVar.wpc_mysql_host
CONFIG['mysql']['user'] = WPCVar.wpc_mysql_user
CONFIG['mysql']['password'] = WPCVar.wpc_mysql_password
CONFIG['mysql']['admin_user'] = WPCVar.wpc_mysql_admin_user
CONFIG['mysql']['admin_password'] = WPCVar.wpc_mysql_admin_password
CONFIG['mysql']['connect_timeout'] = WPCVar.wpc_mysql_connect_timeout
CONFIG['mysql']['dump_path'] = WPCVar.wpc_mysqldump_path
CONFIG['mysql']['client_path'] = WPCVar.wpc_mysql_client_path

CONFIG['wordpress']['web_user'] = WPCVar.wpc_web_user
CONFIG['wordpress']['web_group'] = WPCVar.wpc_web_group
CONFIG['wordpress']['base_url'] = WPCVar.wpc_base_url
CONFIG['wordpress']['admin_user'] = WPCVar.wpc_wp_admin_user
CONFIG['wordpress']['admin_password'] = WPCVar.wpc_wp_admin_password
CONFIG['wordpress']['admin_email'] = WPCVar.wpc_wp_admin_email
CONFIG['wordpress']['wpcli_path'] = WPCVar.wpc_wpcli_path
CONFIG['wordpress']['plugins_install'] = ','.join(
    WPCVar.wpc_plugins_install)
CONFIG['wordpress']['plugins_remove'] = ','.join(WPCVar.wpc_plugins_remove)

CONFIG['log.logging']['level'] = 'INFO'
CONFIG['log.logging']['to_console'] = True


class WPCApp(App):
    class Meta:
        label = 'wpc'

        config_defaults = CONFIG
        config_files = list(WPCVar.wpc_config_files)

        # call sys.exit() on close
        exit_on_close = True

        extensions = ['json']
        output_handler = 'json'

        handlers = [
            WPCBaseController,
            WPCSiteCloneController,
        ]


class WPCTestApp(TestApp, WPCApp):
    """A test app that is better suited for testing."""
    class Meta:
        label = 'wpc'
        config_files = []
        exit_on_close = False


def main():
    with WPCApp() as app:
        try:
            app.run()
        except CaughtSignal as e:
            # Default Cement signals are SIGINT and SIGTERM, exit 0 (non-error)
            print('\n%s' % e)
            app.exit_code = 0
        except AssertionError as e:
            print('AssertionError > %s' % e.args[0], file=sys.stderr)
            app.exit_code = 1


if __name__ == '__main__':
    main()
