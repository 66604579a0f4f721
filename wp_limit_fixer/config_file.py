"""Line-oriented configuration files and their timestamped backups."""

import difflib
import logging
import re
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from wp_limit_fixer.errors import BackupError, MissingFileError

logger = logging.getLogger("wp_limit_fixer")

# Same layout as `date +%F_%T`
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H:%M:%S"
BACKUP_INFIX = ".backup."

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"
LINE_BREAK = re.compile(r"(\r?\n)")


def backup_path_for(path: Union[str, Path], now: Optional[datetime] = None) -> Path:
    """Return ``<path>.backup.<timestamp>`` for the given moment."""
    path = Path(path)
    timestamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.name}{BACKUP_INFIX}{timestamp}")


def backup_file(path: Union[str, Path], now: Optional[datetime] = None) -> Path:
    """
    Copy a file to ``<path>.backup.<timestamp>`` before it is modified.

    Args:
        path: File to back up.
        now: Timestamp to use (defaults to the current time).

    Returns:
        Path of the backup copy.

    Raises:
        MissingFileError: If the file does not exist.
        BackupError: If the copy cannot be written.
    """
    path = Path(path)
    if not path.is_file():
        raise MissingFileError(path)

    backup_path = backup_path_for(path, now)
    try:
        shutil.copy2(path, backup_path)
    except OSError as e:
        raise BackupError(f"Failed to back up {path} to {backup_path}: {e}") from e

    logger.debug(f"Backed up {path} to {backup_path}")
    return backup_path


@dataclass
class ConfigFile:
    """
    An ordered sequence of text lines bound to a filesystem path.

    ``lines`` holds the line contents without terminators. The terminator
    read with each line is remembered and written back unchanged, so only
    lines a transform touched differ on disk. Bytes that are not valid
    UTF-8 survive the round trip through ``surrogateescape``.
    """

    path: Path
    lines: List[str] = field(default_factory=list)
    newline: str = "\n"
    _loaded: List[str] = field(default_factory=list, repr=False)
    _endings: List[str] = field(default_factory=list, repr=False)

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ConfigFile":
        """Read a file into memory, one entry per line without terminators."""
        path = Path(path)
        if not path.is_file():
            raise MissingFileError(path)
        with open(path, "r", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
            text = f.read()

        # Only \n and \r\n end a line; \f, \v and friends stay inside it.
        parts = LINE_BREAK.split(text)
        lines = parts[0::2]
        endings = parts[1::2]
        if lines and lines[-1] == "":
            lines.pop()
        else:
            endings.append("")

        newline = endings[0] if endings and endings[0] else "\n"
        return cls(
            path=path,
            lines=lines,
            newline=newline,
            _loaded=list(lines),
            _endings=endings[: len(lines)],
        )

    def _line_endings(self) -> List[str]:
        """Map each current line to the terminator it was read with."""
        endings = [self.newline] * len(self.lines)
        matcher = difflib.SequenceMatcher(None, self._loaded, self.lines, autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal" or (tag == "replace" and i2 - i1 == j2 - j1):
                endings[j1:j2] = self._endings[i1:i2]
        # Everything but the last line needs a terminator.
        for index in range(len(endings) - 1):
            if not endings[index]:
                endings[index] = self.newline
        return endings

    def save(self) -> None:
        """Write the lines back, each with its original terminator."""
        content = "".join(
            line + ending for line, ending in zip(self.lines, self._line_endings())
        )
        with open(self.path, "w", encoding=ENCODING, errors=ENCODING_ERRORS, newline="") as f:
            f.write(content)
        logger.debug(f"Wrote {len(self.lines)} lines to {self.path}")
