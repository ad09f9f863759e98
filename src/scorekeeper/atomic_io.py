"""Atomic file writes - a failed write never clobbers the previous file."""

import json
import logging
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_json(data, path: Path) -> None:
    """Serialize ``data`` to ``path`` via a temp file in the same directory.

    Raises:
        TypeError: If ``data`` is not JSON-serializable. The existing file
            is left as it was.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            delete=False,
            suffix=".json.tmp",
            dir=path.parent,
        ) as tmp:
            tmp_path = Path(tmp.name)
            json.dump(data, tmp, indent=2, ensure_ascii=False)

        shutil.move(str(tmp_path), str(path))
        logger.debug("Atomically wrote %s", path)
    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise


def atomic_write_csv(df, path: Path, **kwargs) -> None:
    """Write a DataFrame to CSV via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            delete=False,
            suffix=".csv.tmp",
            dir=path.parent,
        ) as tmp:
            tmp_path = Path(tmp.name)
        df.to_csv(tmp_path, **kwargs)

        shutil.move(str(tmp_path), str(path))
        logger.debug("Atomically wrote %d rows to %s", len(df), path)
    except Exception:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
