"""Atomic load/save of a JSON document to a named file."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Generic, Protocol, TypeVar

from knowbase.dailytodos.errors import StoreParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")

TMP_SUFFIX = ".tmp"


class FileSystem(Protocol):
    """Storage collaborator the records are written through."""

    def ensure_directory(self, path: Path) -> None: ...

    def read_text(self, path: Path) -> str | None:
        """File content, or None if the file does not exist."""
        ...

    def write_text(self, path: Path, content: str) -> None: ...

    def rename(self, src: Path, dest: Path) -> None: ...


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    def ensure_directory(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def read_text(self, path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def write_text(self, path: Path, content: str) -> None:
        with path.open("w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

    def rename(self, src: Path, dest: Path) -> None:
        os.replace(src, dest)


class DurableRecord(Generic[T]):
    """One JSON document on disk, written via temp file + rename.

    The rename is the commit point: a crash mid-write leaves the previous
    document intact (plus a stray ``.tmp`` that the next save overwrites).
    """

    def __init__(
        self,
        path: Path,
        *,
        decode: Callable[[dict], T],
        encode: Callable[[T], dict],
        parse_error_code: str,
        fs: FileSystem | None = None,
    ) -> None:
        self.path = path
        self._decode = decode
        self._encode = encode
        self._parse_error_code = parse_error_code
        self._fs = fs or LocalFileSystem()

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + TMP_SUFFIX)

    def exists(self) -> bool:
        return self._fs.read_text(self.path) is not None

    def load(self, default: Callable[[], T]) -> T:
        """Read the document, creating it from ``default()`` if absent."""
        raw = self._fs.read_text(self.path)
        if raw is None:
            doc = default()
            self.save(doc)
            logger.info("Initialized %s", self.path)
            return doc
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise TypeError(f"top level is {type(data).__name__}, expected object")
            return self._decode(data)
        except (json.JSONDecodeError, TypeError, KeyError, ValueError) as e:
            raise StoreParseError(f"{self.path}: {e}", code=self._parse_error_code) from e

    def save(self, doc: T) -> None:
        self._fs.ensure_directory(self.path.parent)
        content = json.dumps(self._encode(doc), indent=2, ensure_ascii=False)
        self._fs.write_text(self.tmp_path, content)
        self._fs.rename(self.tmp_path, self.path)
        logger.debug("Saved %s", self.path)
