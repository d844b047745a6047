import logging
import uuid
from pathlib import Path

import aiofiles
from aiofiles import os

from pemkeygen.errors import FileWriteError
from pemkeygen.models import Output

logger: logging.Logger = logging.getLogger(__name__)


def _sibling(path: Path, suffix: str) -> Path:
    return path.with_name(f".{path.name}.{uuid.uuid4().hex}.{suffix}")


def _write_error(path: Path, err: OSError) -> FileWriteError:
    return FileWriteError(str(path), err.strerror or str(err))


async def _discard(path: Path) -> None:
    try:
        await os.remove(path)
    except (FileNotFoundError, NotADirectoryError):
        pass


async def _remove_directory(path: Path) -> None:
    try:
        await os.rmdir(path)
    except FileNotFoundError:
        pass
    except OSError as err:
        logger.warning(f"Could not remove directory {path}: {err}")


async def _make_parents(path: Path, created: list[Path]) -> None:
    """Create the parents of ``path``; new directories go into ``created``."""
    missing: list[Path] = []
    parent: Path = path.parent
    while not await os.path.exists(parent):
        missing.append(parent)
        parent = parent.parent
    created.extend(reversed(missing))
    try:
        await os.makedirs(path.parent, exist_ok=True)
    except OSError as err:
        raise _write_error(path, err) from err


async def _write_temporary(path: Path, output: Output) -> Path:
    temporary: Path = _sibling(path, "tmp")
    try:
        async with aiofiles.open(temporary, "wb") as key_file:
            await key_file.write(output.encode())
    except OSError as err:
        await _discard(temporary)
        raise _write_error(path, err) from err
    return temporary


async def _move(source: Path, target: Path, path: Path) -> None:
    try:
        await os.replace(source, target)
    except OSError as err:
        raise _write_error(path, err) from err


async def _commit(path: Path, temporary: Path) -> Path | None:
    """Rename ``temporary`` over ``path``; return the old file's backup."""
    backup: Path | None = None
    if await os.path.isfile(path):
        backup = _sibling(path, "bak")
        await _move(path, backup, path)
    try:
        await _move(temporary, path, path)
    except FileWriteError:
        if backup is not None:
            await _move(backup, path, path)
        raise
    return backup


async def write_key_pair(
    private_path: Path,
    public_path: Path,
    private_output: Output,
    public_output: Output,
) -> None:
    """Write both outputs, or neither.

    Each file is first written next to its target and then renamed over
    it. Files being replaced are kept aside until both renames succeed and
    are put back if either fails; directories created on the way are
    removed again.
    """
    targets: list[tuple[Path, Output]] = [
        (Path(private_path), private_output),
        (Path(public_path), public_output),
    ]
    created: list[Path] = []
    temporaries: dict[Path, Path] = {}
    committed: list[tuple[Path, Path | None]] = []
    try:
        for path, output in targets:
            await _make_parents(path, created)
            temporaries[path] = await _write_temporary(path, output)
        for path, _ in targets:
            backup: Path | None = await _commit(path, temporaries[path])
            del temporaries[path]
            committed.append((path, backup))
    except FileWriteError:
        for path, backup in reversed(committed):
            if backup is None:
                await _discard(path)
            else:
                await _move(backup, path, path)
        for temporary in temporaries.values():
            await _discard(temporary)
        for directory in reversed(created):
            await _remove_directory(directory)
        raise

    for path, backup in committed:
        if backup is not None:
            await _discard(backup)
    logger.info(f"Wrote private key to {private_path}")
    logger.info(f"Wrote public key to {public_path}")
