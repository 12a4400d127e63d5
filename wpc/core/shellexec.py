"""wpclone Shell Functions"""
import re
import subprocess
from typing import NamedTuple, Optional, Sequence

from wpc.core.logging import Log


class CommandExecutionError(Exception):
    """custom Exception for command execution"""
    pass


class CommandResult(NamedTuple):
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class WPCShellExec:
    """Method to run external commands, never through a shell"""

    _SECRET_PATTERNS = [
        r'(--dbpass=)(\S+)', r'(--password=)(\S+)', r'(--pass=)(\S+)',
        r'(--admin_password=)(\S+)', r'(--token=)(\S+)',
        r'(--secret=)(\S+)', r'(password\s*=\s*)(\S+)',
        r'(-p\s+)(\S+)', r'(--password\s+)(\S+)',
    ]

    @staticmethod
    def _redact(s: str) -> str:
        for pat in WPCShellExec._SECRET_PATTERNS:
            s = re.sub(pat, r'\1***', s, flags=re.IGNORECASE)
        return s

    @staticmethod
    def run(
        controller,
        args: Sequence[str],
        input_data: Optional[str] = None,
        stdin_path: Optional[str] = None,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
        log: bool = True,
    ) -> CommandResult:
        """Run an argument vector and capture its output.

        Args:
            controller: controller owning the app log
            args: program and arguments
            input_data: text fed on stdin
            stdin_path: file streamed on stdin, takes precedence over
                input_data
            timeout: seconds before the process is killed

        Returns:
            CommandResult; a non-zero returncode is left to the caller.

        Raises:
            CommandExecutionError: the program could not be started or
                exceeded the timeout.
        """
        if isinstance(args, str):
            raise TypeError("commands must be argument sequences")
        args = [str(a) for a in args]
        if log:
            Log.debug(controller,
                      f"Running command: {WPCShellExec._redact(' '.join(args))}")

        try:
            if stdin_path is not None:
                with open(stdin_path, 'rb') as stdin:
                    proc = subprocess.run(args, stdin=stdin,
                                          capture_output=True, cwd=cwd,
                                          timeout=timeout)
                stdout = proc.stdout.decode('utf-8', errors='replace')
                stderr = proc.stderr.decode('utf-8', errors='replace')
            else:
                proc = subprocess.run(
                    args,
                    input=input_data,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    capture_output=True,
                    cwd=cwd,
                    timeout=timeout,
                )
                stdout, stderr = proc.stdout, proc.stderr
        except subprocess.TimeoutExpired as e:
            Log.debug(controller, f"Timeout: {e}")
            raise CommandExecutionError(
                f"{args[0]} timed out after {timeout} seconds")
        except OSError as e:
            Log.debug(controller, str(e))
            raise CommandExecutionError(f"{args[0]}: {e.strerror or e}")

        if stderr.strip():
            Log.debug(controller, f"Command Output: {stdout}, "
                                  f"\nCommand Error: {WPCShellExec._redact(stderr)}")
        else:
            Log.debug(controller, f"Command Output: {stdout}")

        return CommandResult(proc.returncode, stdout, stderr)

    @staticmethod
    def cmd_exec(controller, args: Sequence[str], errormsg: str = '',
                 **kwargs) -> bool:
        """Run a command and report success as a bool."""
        result = WPCShellExec.run(controller, args, **kwargs)
        if not result.ok and errormsg:
            Log.warn(controller, errormsg)
        return result.ok
