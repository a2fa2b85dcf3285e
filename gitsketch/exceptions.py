"""Exception hierarchy for gitsketch workflows."""

from pathlib import Path
from typing import List, Optional


class GitSketchError(Exception):
    """Base class for every error raised by gitsketch."""

    pass


class ConfigError(GitSketchError):
    """Raised when the configuration file is missing or lacks required keys."""

    pass


class SourceNotFoundError(GitSketchError):
    """Raised when a sketch file or sketch directory does not exist."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class ContainerLayoutError(GitSketchError):
    """
    Raised when a sketch file does not live in a directory of the same name.

    The layout <name>/<name>.sketch is what ties a container to its unpacked
    tree, exports and README.
    """

    pass


class ArchiveError(GitSketchError):
    """Raised when a .sketch container cannot be read or written."""

    pass


class StagingError(GitSketchError):
    """
    Exception raised when a git command fails.

    Attributes:
        command: The git command line that failed
        returncode: Exit status of the git process
        stderr: Standard error captured from git
    """

    def __init__(self, message: str, command: List[str], returncode: int, stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr

        parts = [message, f"Command: {' '.join(command)}", f"Exit status: {returncode}"]
        if stderr.strip():
            parts.append(f"git said: {stderr.strip()}")

        super().__init__("\n".join(parts))


class VectorDocumentError(GitSketchError):
    """Raised when an exported SVG cannot be parsed for font embedding."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class ToolNotFoundError(GitSketchError):
    """Raised when sketchtool cannot be found at the configured path or on PATH."""

    pass


class ExportError(GitSketchError):
    """
    Exception raised when sketchtool exits with a non-zero status.

    Attributes:
        command: The sketchtool command line
        returncode: Exit status of sketchtool
        stdout: Standard output captured from sketchtool
        stderr: Standard error captured from sketchtool
    """

    def __init__(
        self,
        message: str,
        command: List[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

        parts = [message, f"Exit status: {returncode}"]
        if stderr.strip():
            # Truncate long tool output
            details = stderr.strip()
            details = details[:500] + "..." if len(details) > 500 else details
            parts.append(f"\nsketchtool stderr:\n{details}")

        super().__init__("\n".join(parts))
