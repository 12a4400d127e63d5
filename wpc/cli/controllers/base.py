"""wpclone base controller."""
from cement import Controller

from wpc.core.variables import WPCVar

VERSION_BANNER = """
wpclone v%s
Clone WordPress installations between directories and databases
""" % WPCVar.wpc_version


class WPCBaseController(Controller):
    class Meta:
        label = 'base'
        description = ('wpclone copies WordPress sites: files, database '
                       'and re-provisioning')
        arguments = [
            (['-v', '--version'],
             dict(action='version', version=VERSION_BANNER)),
        ]

    def _default(self):
        self.app.args.print_help()
