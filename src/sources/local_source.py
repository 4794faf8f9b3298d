"""Local filesystem byte sources.

Opens files under PROJECT_ROOT in binary mode, with containment checks to
prevent access outside the project.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from core.errors import AccessDeniedError, NotFoundError, ValidationError


class LocalSource:
    # Opens binary streams for files under a fixed root.

    def __init__(self, *, project_root: Path) -> None:
        self._project_root = project_root.resolve()

    def _resolve_under_root(self, rel_path: str) -> Path:
        raw = (rel_path or "").strip()
        if not raw:
            raise ValidationError("Path is empty")

        p = (self._project_root / raw).resolve()

        # Strong containment check to prevent directory traversal/outside access
        try:
            p.relative_to(self._project_root)
        except ValueError as e:
            raise AccessDeniedError("Access outside project root is not allowed") from e

        return p

    def open(self, path: str) -> BinaryIO:
        """Open ``path`` for binary reading. The caller owns the returned file."""
        p = self._resolve_under_root(path)

        if not p.exists():
            raise NotFoundError(f"File not found: {path}")
        if not p.is_file():
            raise ValidationError(f"Not a file: {path}")

        return p.open("rb")
