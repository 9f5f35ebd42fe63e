import re
import time
from pathlib import Path
from typing import BinaryIO, Optional

from ..models.files import StoredBlob
from ..utils.logging import logger

_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_MAX_NAME_LENGTH = 180
_MAX_NAME_ATTEMPTS = 50


class BlobTooLargeError(Exception):
    """The payload exceeded the configured byte limit."""

    def __init__(self, max_bytes: int):
        super().__init__(f"File exceeds the maximum size of {max_bytes} bytes")
        self.max_bytes = max_bytes


class BlobStore:
    """Filesystem directory holding uploaded files under generated names."""

    def __init__(self, root: Path, max_bytes: int, chunk_size: int = 1024 * 1024) -> None:
        self.root = Path(root).resolve()
        self.max_bytes = max_bytes
        self.chunk_size = chunk_size
        self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def sanitize_name(original_name: str) -> str:
        """Reduce a client-supplied filename to a safe single path component."""
        name = Path(original_name.replace("\\", "/")).name
        name = _WHITESPACE.sub("_", name.strip())
        name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
        if len(name) > _MAX_NAME_LENGTH:
            stem, dot, suffix = name.rpartition(".")
            if dot and len(suffix) < 16:
                name = stem[: _MAX_NAME_LENGTH - len(suffix) - 1] + "." + suffix
            else:
                name = name[:_MAX_NAME_LENGTH]
        return name or "upload"

    def generate_name(self, original_name: str, timestamp_ms: Optional[int] = None) -> str:
        """``<epoch millis>-<sanitized original name>``"""
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        return f"{timestamp_ms}-{self.sanitize_name(original_name)}"

    def path_for(self, stored_name: str) -> Path:
        """Resolve a stored name inside the root, refusing anything that escapes it."""
        candidate = (self.root / stored_name).resolve()
        if candidate.parent != self.root:
            raise ValueError(f"Invalid stored name: {stored_name!r}")
        return candidate

    def exists(self, stored_name: str) -> bool:
        return self.path_for(stored_name).is_file()

    def write(self, original_name: str, source: BinaryIO) -> StoredBlob:
        """Copy ``source`` into a freshly named blob.

        A payload larger than ``max_bytes`` leaves nothing behind and raises
        ``BlobTooLargeError``. Any ``OSError`` is propagated after the partial
        blob has been removed.
        """
        timestamp_ms = int(time.time() * 1000)
        for _ in range(_MAX_NAME_ATTEMPTS):
            stored_name = self.generate_name(original_name, timestamp_ms)
            path = self.path_for(stored_name)
            try:
                output = path.open("xb")
            except FileExistsError:
                timestamp_ms += 1
                continue
            break
        else:
            raise FileExistsError(f"Could not allocate a blob name for {original_name!r}")

        size_bytes = 0
        try:
            with output:
                while True:
                    chunk = source.read(self.chunk_size)
                    if not chunk:
                        break
                    size_bytes += len(chunk)
                    if size_bytes > self.max_bytes:
                        raise BlobTooLargeError(self.max_bytes)
                    output.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        logger.log_step("blob_written", {
            "stored_name": stored_name,
            "size_bytes": size_bytes,
        })
        return StoredBlob(stored_name=stored_name, size_bytes=size_bytes)

    def delete(self, stored_name: str) -> bool:
        """Remove a blob. Returns False when it was already absent."""
        try:
            self.path_for(stored_name).unlink()
        except FileNotFoundError:
            return False
        return True
