"""File reading operations module."""
from pathlib import Path
from typing import Optional

from repoperms.core.errors import StorageError


class FileReader:
    """Handles file reading operations only."""

    def __init__(self, base_path: Path):
        self.base_path = Path(base_path).resolve()

    def read_text(self, path: Path) -> Optional[str]:
        """Read entire file content, or None if the file does not exist."""
        full_path = self._resolve_safe_path(path)

        try:
            with open(full_path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except PermissionError:
            raise StorageError(f"Permission denied: {path}")
        except OSError as e:
            raise StorageError(f"Failed to read file: {e}")

    def file_exists(self, path: Path) -> bool:
        try:
            return self._resolve_safe_path(path).is_file()
        except StorageError:
            return False

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
