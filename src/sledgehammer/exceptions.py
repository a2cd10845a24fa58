"""Custom exceptions."""

from collections.abc import Sequence


class SledgehammerError(Exception):
    """Base class for all custom exceptions.

    Useful to catch all of them.
    """


class PrivilegeError(SledgehammerError):
    """The process does not run with elevated privileges."""

    def __init__(self, euid: int):
        """Raise the PrivilegeError.

        Args:
            euid (int): Effective user id the process is running with.
        """
        self.euid = euid
        super().__init__("Please run this script with sudo or as root")


class CommandError(SledgehammerError):
    """A host command that had to succeed exited with a nonzero status."""

    def __init__(self, cmd: Sequence[str], returncode: int, stderr: str = ""):
        """Raise the CommandError.

        Args:
            cmd (Sequence[str]): The command line that was executed.
            returncode (int): Exit status of the command.
            stderr (str): Captured standard error, if any.
        """
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command '{' '.join(self.cmd)}' failed with exit code {returncode}"
        if stderr.strip():
            msg += f": {stderr.strip()}"
        super().__init__(msg)


class ManifestError(SledgehammerError):
    """The rendered compose manifest does not describe the installed services."""
