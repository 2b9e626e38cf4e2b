"""File writing operations module."""
import os
import tempfile
from pathlib import Path

from repoperms.core.errors import StorageError


class FileWriter:
    """Handles file writing operations only."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path).resolve()

    def write_text(self, path: Path, content: str) -> None:
        """Atomically replace ``path`` with ``content``.

        The content goes to a temporary file in the destination directory
        which is renamed over the target, so readers see either the old or
        the new file and never a partial one.
        """
        full_path = self._resolve_safe_path(path)
        tmp_path = None

        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)

            fd, name = tempfile.mkstemp(
                dir=full_path.parent,
                prefix=f".{full_path.name}.",
                suffix=".tmp"
            )
            tmp_path = Path(name)
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())

            os.replace(tmp_path, full_path)
            tmp_path = None

        except PermissionError:
            raise StorageError(f"Permission denied: {path}")
        except OSError as e:
            raise StorageError(f"Failed to write file: {e}")
        finally:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    def _resolve_safe_path(self, path: Path) -> Path:
        """Resolve path ensuring it's within base directory."""
        if path.is_absolute():
            full_path = path
        else:
            full_path = self.base_path / path

        resolved = full_path.resolve()

        try:
            resolved.relative_to(self.base_path)
        except ValueError:
            raise StorageError(
                f"Path '{path}' resolves outside base directory"
            )

        return resolved
