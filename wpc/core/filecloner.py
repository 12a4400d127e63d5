"""Copies a WordPress tree into a new target directory"""
import os

from wpc.core.errors import FilesystemError
from wpc.core.fileutils import FileCopyError, WPCFileUtils
from wpc.core.logging import Log
from wpc.core.variables import WPCVar


class FileCloner:

    def __init__(self, controller):
        self.controller = controller

    def clone(self, outcome, source, target):
        """Create target and copy source into it.

        Returns the outcome extended with steps 1 and 2. Raises
        FilesystemError carrying the partial outcome.
        """
        outcome = outcome.add_step(1, 'Creating target directory structure...')
        try:
            WPCFileUtils.mkdir(self.controller, target, WPCVar.wpc_dir_mode)
        except OSError as e:
            raise FilesystemError(
                f"Failed to create target directory {target}",
                detail=str(e), outcome=outcome)
        if not os.path.isdir(target):
            raise FilesystemError(
                f"Failed to create target directory {target}",
                outcome=outcome)

        outcome = outcome.add_step(2, 'Copying WordPress files...')
        try:
            WPCFileUtils.copyfiles(self.controller, source, target)
        except FileCopyError as e:
            detail = '\n'.join(f"{src} -> {dst}: {why}"
                               for src, dst, why in e.failures)
            raise FilesystemError(
                f"Failed to copy {len(e.failures)} entries from {source} "
                f"to {target}", detail=detail, outcome=outcome)
        except OSError as e:
            raise FilesystemError(
                f"Failed to copy files from {source} to {target}",
                detail=str(e), outcome=outcome)

        Log.info(self.controller, f"Copied {source} to {target}")
        return outcome
