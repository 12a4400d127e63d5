"""wpclone core variables module"""


class WPCVar:
    """Built-in defaults, overridden by the config file and environment"""

    wpc_version = '1.0.0'

    # Config files read in order, later files win
    wpc_config_files = [
        '/etc/wpc/wpc.conf',
        '~/.wpc.conf',
        '~/.config/wpc/wpc.conf',
    ]
    wpc_env_prefix = 'WPC_'

    # [clone]
    wpc_base_path = '/var/www/html'
    wpc_storage_dir = '/var/lib/wpc/private'
    wpc_command_timeout = 0

    # [mysql]
    wpc_mysql_host = 'localhost'
    wpc_mysql_user = 'root'
    wpc_mysql_password = ''
    wpc_mysql_admin_user = ''
    wpc_mysql_admin_password = ''
    wpc_mysql_connect_timeout = 10
    wpc_mysqldump_path = 'mysqldump'
    wpc_mysql_client_path = 'mysql'

    # [wordpress]
    wpc_web_user = 'www-data'
    wpc_web_group = 'www-data'
    wpc_base_url = 'example.com'
    wpc_wp_admin_user = 'admin'
    wpc_wp_admin_password = 'password'
    wpc_wp_admin_email = 'ilovewhirlpool@example.com'
    wpc_wpcli_path = 'wp'
    wpc_plugins_install = ['all-in-one-wp-migration']
    wpc_plugins_remove = ['akismet']
    wpc_plugin_files_remove = ['hello.php']

    wpc_dir_mode = 0o755
    wpc_file_mode = 0o644
    wpc_wpconfig_mode = 0o600

    # MySQL/MariaDB owned schemas
    wpc_reserved_db_names = (
        'mysql', 'information_schema', 'performance_schema', 'sys')
    wpc_db_name_max_length = 64
