"""Reading and writing export bundles as standalone JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import StorageError, StorageErrorCode
from ..state.model import ExportBundle


def load_bundle(path: Path) -> ExportBundle:
    """Parse the bundle at *path*.  The version is checked by the importer."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise StorageError(
            StorageErrorCode.INVALID_JSON, f"{path} is not valid UTF-8: {exc}"
        ) from exc
    except OSError as exc:
        raise StorageError(
            StorageErrorCode.STORAGE_UNAVAILABLE, f"Could not read {path}: {exc}"
        ) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise StorageError(
            StorageErrorCode.INVALID_JSON, f"{path} is not valid JSON: {exc}"
        ) from exc
    return ExportBundle.from_dict(data)


def write_bundle(bundle: ExportBundle, path: Path) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            json.dumps(bundle.to_dict(), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except OSError as exc:
        raise StorageError(
            StorageErrorCode.WRITE_FAILED, f"Could not write {path}: {exc}"
        ) from exc
