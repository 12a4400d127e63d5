"""wpclone file utils"""
import os
import shutil
from typing import List, Tuple

from wpc.core.logging import Log


class FileCopyError(Exception):
    """Copy finished with per-entry failures"""

    def __init__(self, failures: List[Tuple[str, str, str]]):
        super().__init__(f"{len(failures)} entries failed to copy")
        self.failures = failures


class WPCFileUtils:
    """Utilities to operate on files"""

    @staticmethod
    def mkdir(self, path, mode=0o755):
        """Create a directory tree.

        An already existing path is accepted only if it is a directory.
        """
        try:
            Log.debug(self, f"Creating directory {path}")
            os.makedirs(path, mode=mode)
        except FileExistsError:
            if not os.path.isdir(path):
                raise
            Log.debug(self, f"{path} already exists")

    @staticmethod
    def copyfiles(self, src, dest):
        """Recursively copy src into the existing directory dest.

        Symlinks are copied as links. Every failed entry is collected and
        reported at the end through FileCopyError.
        """
        Log.debug(self, f"Copying {src} to {dest}")
        try:
            shutil.copytree(src, dest, symlinks=True, dirs_exist_ok=True)
        except shutil.Error as e:
            failures = [tuple(map(str, entry)) for entry in e.args[0]]
            for entry in failures:
                Log.debug(self, f"Copy failed: {entry}")
            raise FileCopyError(failures)

    @staticmethod
    def rm(self, path, base=None):
        """Remove a file or directory tree.

        Refuses to remove ``base`` or the filesystem root.
        """
        real = os.path.realpath(path)
        protected = {os.path.realpath('/')}
        if base:
            protected.add(os.path.realpath(base))
        if real in protected:
            Log.debug(self, f"Tried to remove {path}, but didn't remove it")
            return False
        if os.path.isdir(path) and not os.path.islink(path):
            Log.debug(self, f"Removing {path}")
            shutil.rmtree(path)
            return True
        if os.path.lexists(path):
            Log.debug(self, f"Removing {path}")
            os.remove(path)
            return True
        Log.debug(self, f"{path} does not exist")
        return False

    @staticmethod
    def chmod_tree(self, path, dir_mode=0o755, file_mode=0o644):
        """Set modes on every directory and regular file below path."""
        Log.debug(self, f"Setting permissions on {path}")
        os.chmod(path, dir_mode)
        for root, dirs, files in os.walk(path):
            for name in dirs:
                full = os.path.join(root, name)
                if not os.path.islink(full):
                    os.chmod(full, dir_mode)
            for name in files:
                full = os.path.join(root, name)
                if not os.path.islink(full):
                    os.chmod(full, file_mode)

    @staticmethod
    def chown(self, path, user, group, recursive=False):
        """Change owner of path, optionally for the whole tree."""
        Log.debug(self, f"Changing ownership of {path} to {user}:{group}")
        shutil.chown(path, user=user, group=group)
        if not recursive:
            return
        for root, dirs, files in os.walk(path):
            for name in dirs + files:
                full = os.path.join(root, name)
                if not os.path.islink(full):
                    shutil.chown(full, user=user, group=group)

    @staticmethod
    def chmod(self, path, mode):
        Log.debug(self, f"Changing permissions of {path} to {oct(mode)}")
        os.chmod(path, mode)

    @staticmethod
    def is_within(path, base):
        """True when path resolves strictly inside base."""
        base = os.path.realpath(base)
        real = os.path.realpath(path)
        return real != base and os.path.commonpath([real, base]) == base
