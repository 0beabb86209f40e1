"""JSON-file-backed POS persistence with name uniqueness."""

from __future__ import annotations

import threading
from dataclasses import replace
from pathlib import Path

from campus_coffee.common.errors import DuplicatePosNameError, PosNotFoundError
from campus_coffee.common.fs import read_json, write_json
from campus_coffee.common.models import Pos
from campus_coffee.common.time_utils import utc_now


class PosStore:
    """Stores POS rows as ``{"next_id": int, "rows": [...]}``.

    With ``path=None`` rows live in memory only. Every operation holds the
    store lock, so name uniqueness is first-writer-wins within the process.
    """

    def __init__(self, path: Path | None = None) -> None:
        self.path = path
        self.lock = threading.Lock()
        self._rows: dict[int, Pos] = {}
        self._next_id = 1
        if path is not None and path.exists():
            self._load()

    def _load(self) -> None:
        payload = read_json(self.path)
        rows = [Pos.from_dict(row) for row in payload.get("rows", [])]
        self._rows = {row.id: row for row in rows}
        self._next_id = int(payload.get("next_id", max(self._rows, default=0) + 1))

    def _flush(self) -> None:
        if self.path is None:
            return
        write_json(
            self.path,
            {
                "next_id": self._next_id,
                "rows": [self._rows[pos_id].to_dict() for pos_id in sorted(self._rows)],
            },
        )

    def _assert_unique_name(self, pos: Pos) -> None:
        for existing in self._rows.values():
            if existing.name == pos.name and existing.id != pos.id:
                raise DuplicatePosNameError(pos.name)

    def clear(self) -> None:
        with self.lock:
            self._rows = {}
            self._next_id = 1
            self._flush()

    def get_all(self) -> list[Pos]:
        with self.lock:
            return [self._rows[pos_id] for pos_id in sorted(self._rows)]

    def get_by_id(self, pos_id: int) -> Pos:
        with self.lock:
            pos = self._rows.get(pos_id)
        if pos is None:
            raise PosNotFoundError(pos_id)
        return pos

    def upsert(self, pos: Pos) -> Pos:
        with self.lock:
            self._assert_unique_name(pos)
            now = utc_now()
            if pos.id is None:
                saved = replace(pos, id=self._next_id, created_at=now, updated_at=now)
                self._next_id += 1
            else:
                existing = self._rows.get(pos.id)
                if existing is None:
                    raise PosNotFoundError(pos.id)
                saved = replace(pos, created_at=existing.created_at, updated_at=now)
            self._rows[saved.id] = saved
            self._flush()
            return saved
