"""Write operation results to JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def to_jsonable(result: Any) -> Any:
    """Convert models (or lists of them) into plain JSON-compatible data."""
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json")
    if isinstance(result, (list, tuple)):
        return [to_jsonable(item) for item in result]
    return result


def write_output(result: Any, dest: str | Path) -> Path:
    """Serialize ``result`` to ``dest``, creating parent directories, and return the path."""
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(
        json.dumps(to_jsonable(result), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return dest
