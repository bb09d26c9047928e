# storage.py
import logging
import os
from pathlib import Path

from werkzeug.security import safe_join

from config import CONFLICT_OVERWRITE, CONFLICT_REJECT, CONFLICT_RENAME
from utils import InvalidFilename, numbered_name, validate_filename

logger = logging.getLogger(__name__)

# upper bound on name-1, name-2, ... probes in rename mode
MAX_RENAME_ATTEMPTS = 10000


class StorageError(Exception):
    """The upload could not be written under the root directory."""


class FileConflict(StorageError):
    """Target name already exists and the policy forbids replacing it."""


def target_path(root, filename: str) -> Path:
    """Join a validated name onto ``root``; never returns a path outside it."""
    name = validate_filename(filename)
    joined = safe_join(os.fspath(root), name)
    if joined is None:
        raise InvalidFilename(f"unsafe file name: {filename!r}")
    return Path(joined)


def _write(path: Path, payload: bytes, mode: str) -> None:
    # open errors propagate untouched; only a file we created gets removed
    f = open(path, mode)
    try:
        with f:
            f.write(payload)
    except OSError:
        try:
            path.unlink()
        except OSError:
            logger.warning("could not remove partial upload %s", path)
        raise


def store_upload(root, filename: str, payload: bytes, policy: str = CONFLICT_OVERWRITE) -> Path:
    """Persist ``payload`` as ``filename`` under ``root`` and return the final path.

    Raises InvalidFilename, FileConflict (policy ``reject``) or StorageError.
    """
    path = target_path(root, filename)
    try:
        if policy == CONFLICT_OVERWRITE:
            _write(path, payload, "wb")
            return path
        if policy == CONFLICT_REJECT:
            try:
                _write(path, payload, "xb")
            except FileExistsError:
                raise FileConflict(f"{path.name} already exists")
            return path
        if policy == CONFLICT_RENAME:
            candidate = path
            for n in range(1, MAX_RENAME_ATTEMPTS + 1):
                try:
                    _write(candidate, payload, "xb")
                    return candidate
                except FileExistsError:
                    try:
                        candidate = target_path(root, numbered_name(path.name, n))
                    except InvalidFilename:
                        # extension alone leaves no room for a counter
                        break
            raise FileConflict(f"no free name for {path.name}")
    except OSError as e:
        raise StorageError(f"cannot write {path}: {e}") from e
    raise ValueError(f"unknown conflict policy: {policy!r}")
