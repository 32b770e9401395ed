import os
import logging
from pathlib import Path
from typing import Optional, Union

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def write_pid(path: PathLike) -> None:
    """
    Writes the current process ID to the given file, replacing its content.

    The file holds only the decimal PID. Errors opening or writing the file
    are raised to the caller.

    :param path: The PID file to write.
    """
    pid = os.getpid()
    with open(path, "w") as handle:
        handle.write(str(pid))
    log.debug(f"Wrote PID {pid} to '{path}'.")


def read_pid(path: PathLike) -> Optional[int]:
    """
    Reads a PID file written by `write_pid`.

    :param path: The PID file to read.
    :return: The PID, or None if the file does not exist or is malformed.
    """
    try:
        content = Path(path).read_text().strip()
    except FileNotFoundError:
        return None
    try:
        return int(content)
    except ValueError:
        log.warning(f"PID file '{path}' does not contain a PID: {content!r}")
        return None


def remove_pid(path: PathLike) -> None:
    """Removes the PID file if present."""
    Path(path).unlink(missing_ok=True)
