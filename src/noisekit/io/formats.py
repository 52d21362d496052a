from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import numpy as np

from noisekit.core.constants import ENCODING


def read_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding=ENCODING) as f:
        return json.load(f)


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding=ENCODING) as f:
        json.dump(payload, f, indent=2)


def read_record_text(path: Path) -> str:
    """Serialized generator text, with the trailing newline written by write_record_text() removed."""
    return path.read_text(encoding=ENCODING).strip()


def write_record_text(path: Path, record: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(record + "\n", encoding=ENCODING)


def save_field(path: Path, field: np.ndarray) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        np.save(f, field, allow_pickle=False)


def load_field(path: Path) -> np.ndarray:
    with path.open("rb") as f:
        return np.load(f, allow_pickle=False)
