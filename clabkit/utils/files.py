"""Small file-system helpers."""

from __future__ import annotations

import os
import shutil
import stat


def file_exists(filename: str | os.PathLike) -> bool:
    """Return True if ``filename`` exists and is not a directory."""
    try:
        info = os.stat(filename)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return not stat.S_ISDIR(info.st_mode)


def copy_file(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy a regular file from ``src`` to ``dst``.

    Nothing is done when both name the same file. Raises ValueError for
    non-regular source or destination files.
    """
    src_info = os.stat(src)
    if not stat.S_ISREG(src_info.st_mode):
        raise ValueError(
            f"CopyFile: non-regular source file {os.path.basename(src)} "
            f"({stat.filemode(src_info.st_mode)!r})"
        )
    try:
        dst_info = os.stat(dst)
    except FileNotFoundError:
        pass
    else:
        if not stat.S_ISREG(dst_info.st_mode):
            raise ValueError(
                f"CopyFile: non-regular destination file {os.path.basename(dst)} "
                f"({stat.filemode(dst_info.st_mode)!r})"
            )
        if os.path.samestat(src_info, dst_info):
            return
    copy_file_contents(src, dst)


def copy_file_contents(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Replace the contents of ``dst`` with those of ``src``, creating it if needed."""
    with open(src, "rb") as source, open(dst, "wb") as target:
        shutil.copyfileobj(source, target)
        target.flush()
        os.fsync(target.fileno())


def create_file(file: str | os.PathLike, content: str) -> None:
    """Write ``content`` followed by a newline to ``file``."""
    with open(file, "w", encoding="utf-8") as f:
        f.write(content + "\n")


def create_directory(path: str | os.PathLike, perm: int) -> None:
    """Create ``path`` and its parents with mode ``perm`` if it does not exist."""
    if not os.path.exists(path):
        try:
            os.makedirs(path, mode=perm, exist_ok=True)
        except OSError:
            pass


def read_file_content(file: str | os.PathLike) -> bytes:
    """Return the bytes of ``file``; raises FileNotFoundError if it is missing."""
    if not file_exists(file):
        raise FileNotFoundError(f"file {file} does not exist")
    with open(file, "rb") as f:
        return f.read()