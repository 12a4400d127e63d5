"""WP-CLI command helpers"""
from wpc.core.shellexec import WPCShellExec


def build_wp_command(wpcli_path, path, action, *args, **kwargs):
    """Build a WP-CLI argument vector.

    Positional args are passed through, keyword args become ``--key=value``
    options. ``True`` or ``None`` values become bare flags, ``False`` is
    skipped.
    """
    command = [wpcli_path, '--allow-root', f'--path={path}']
    command.extend(action.split())

    for arg in args:
        if arg is None:
            continue
        arg_text = str(arg)
        if arg_text:
            command.append(arg_text)

    for key, value in kwargs.items():
        if isinstance(value, bool):
            if value:
                command.append(f"--{key}")
        elif value is None:
            command.append(f"--{key}")
        else:
            command.append(f"--{key}={value}")
    return command


class WPCWpCli:
    """Runs WP-CLI against one WordPress installation"""

    def __init__(self, controller, settings, path):
        self.controller = controller
        self.settings = settings
        self.path = path

    def command(self, action, *args, **kwargs):
        return build_wp_command(self.settings.wpcli_path, self.path,
                                action, *args, **kwargs)

    def run(self, action, *args, input_data=None, **kwargs):
        return WPCShellExec.run(self.controller,
                                self.command(action, *args, **kwargs),
                                input_data=input_data,
                                cwd=self.path,
                                timeout=self.settings.timeout)

    def try_run(self, action, *args, errormsg='', **kwargs):
        return WPCShellExec.cmd_exec(self.controller,
                                     self.command(action, *args, **kwargs),
                                     errormsg=errormsg, cwd=self.path,
                                     timeout=self.settings.timeout)
