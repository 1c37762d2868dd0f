"""Persisted record of generation runs."""
from __future__ import annotations

import hashlib
import json
import os
import threading
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

HISTORY_LIMIT = 20


def _empty_state() -> Dict[str, Any]:
    return {
        "last_build_ts": None,
        "input_files": {},
        "files_total": 0,
        "rejected": [],
        "hash_output": None,
        "history": [],
    }


def file_digest(path: Path) -> Optional[str]:
    try:
        return hashlib.sha256(Path(path).read_bytes()).hexdigest()
    except OSError:
        return None


class StateStore:
    """Keep the latest run plus a short history in one JSON file.

    ``input_files`` maps every input path of the last run to the sha256 of
    its contents, which lets :meth:`changed_inputs` tell what moved since.
    """

    def __init__(self, path: Path | str, history_limit: int = HISTORY_LIMIT):
        self.path = Path(path)
        self.history_limit = history_limit
        self._lock = threading.Lock()

    def load(self) -> Dict[str, Any]:
        state = _empty_state()
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError):
            return state
        if isinstance(data, dict):
            state.update(data)
        return state

    def record_run(
        self,
        input_files: Iterable[Path],
        files_total: int,
        rejected: List[Dict[str, Any]],
        hash_output: str,
    ) -> Dict[str, Any]:
        """Store one finished run atomically and return the new state."""
        hashes = {str(Path(path)): file_digest(path) for path in input_files}
        entry = {
            "ts": time.time(),
            "files_total": files_total,
            "rejected_total": len(rejected),
            "hash_output": hash_output,
        }
        with self._lock:
            state = self.load()
            history = list(state.get("history") or [])
            history.append(entry)
            state.update(
                last_build_ts=entry["ts"],
                input_files=dict(sorted(hashes.items())),
                files_total=files_total,
                rejected=list(rejected),
                hash_output=hash_output,
                history=history[-self.history_limit:],
            )
            self._write(state)
            return state

    def changed_inputs(self, input_files: Iterable[Path]) -> List[str]:
        """Paths that are new or whose contents differ from the last run."""
        previous = self.load().get("input_files") or {}
        changed = []
        for path in input_files:
            key = str(Path(path))
            if key not in previous or previous[key] != file_digest(path):
                changed.append(key)
        return sorted(changed)

    def _write(self, state: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as handle:
            json.dump(state, handle, ensure_ascii=False, indent=2)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, self.path)
