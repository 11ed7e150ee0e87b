#!/usr/bin/env python3
"""Write package parts into a stored (uncompressed) ZIP archive."""

from __future__ import annotations

import contextlib
import re
from pathlib import Path
from typing import Iterable, Set
from zipfile import ZIP_STORED, ZipFile, ZipInfo

from core.deck_model import PackagePart
from core.errors import ArchiveError, PathEncodingError

# DOS epoch; the same parts always produce the same archive bytes.
ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)
ENTRY_MODE = 0o644

_DRIVE = re.compile(r"^[A-Za-z]:")


def validate_entry_name(name: str) -> str:
    """Return ``name`` if it can be stored as-is as an archive entry name."""
    if not isinstance(name, str) or not name:
        raise PathEncodingError("entry name must be non-empty text", path=repr(name))
    if name.startswith("/") or _DRIVE.match(name):
        raise PathEncodingError("entry name must be relative", path=name)
    if "\\" in name:
        raise PathEncodingError("entry name must use forward slashes", path=name)
    if "\x00" in name:
        raise PathEncodingError("entry name contains NUL", path=repr(name))
    if any(seg in ("", ".", "..") for seg in name.split("/")):
        raise PathEncodingError("entry name has an empty or dot segment", path=name)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise PathEncodingError("entry name is not representable as UTF-8", path=repr(name)) from exc
    return name


def _entry_info(name: str) -> ZipInfo:
    info = ZipInfo(name, date_time=ENTRY_DATE_TIME)
    info.compress_type = ZIP_STORED
    info.external_attr = ENTRY_MODE << 16
    return info


def _discard(archive: ZipFile, out_path: Path) -> None:
    with contextlib.suppress(OSError, ValueError):
        archive.close()
    with contextlib.suppress(OSError):
        out_path.unlink()


def write_package(parts: Iterable[PackagePart], out_path: Path) -> Path:
    """Store ``parts`` in order at ``out_path``, replacing any existing file.

    Any failure removes the incomplete file and raises ``ArchiveError``
    tagged with the phase that failed.
    """
    out_path = Path(out_path)
    try:
        archive = ZipFile(out_path, "w", compression=ZIP_STORED)
    except OSError as exc:
        raise ArchiveError("open", f"cannot create {out_path}: {exc.strerror or exc}", path=str(out_path)) from exc

    seen: Set[str] = set()
    try:
        for part in parts:
            name = validate_entry_name(part.relative_path)
            if name in seen:
                raise PathEncodingError("duplicate entry name", path=name)
            seen.add(name)
            try:
                archive.writestr(_entry_info(name), part.data)
            except OSError as exc:
                raise ArchiveError("entry_write", f"cannot write {name}: {exc.strerror or exc}", path=name) from exc
    except BaseException:
        _discard(archive, out_path)
        raise

    try:
        archive.close()
    except OSError as exc:
        with contextlib.suppress(OSError):
            out_path.unlink()
        raise ArchiveError("finalize", f"cannot finalize {out_path}: {exc.strerror or exc}", path=str(out_path)) from exc
    return out_path
