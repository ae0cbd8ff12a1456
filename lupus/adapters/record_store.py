"""
Record stores implementing the load/insert/delete/commit persistence contract.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Dict, Any, List, Optional, Tuple

from ..exceptions import PersistenceError
from .records import EntityKind, kind_of, to_record, from_record

logger = logging.getLogger(__name__)

Operation = Tuple[str, EntityKind, str, Optional[Dict[str, Any]]]


class PersistenceGateway(ABC):
    """Durable storage seen by the moderator."""

    @abstractmethod
    def load(self, kind: EntityKind) -> list:
        """Load every entity of a kind."""
        pass

    @abstractmethod
    def insert(self, entity) -> None:
        """Stage an insert (or replacement, by id) of an entity."""
        pass

    @abstractmethod
    def delete(self, entity) -> None:
        """Stage the removal of an entity."""
        pass

    @abstractmethod
    def commit(self) -> None:
        """
        Make staged changes durable.

        Raises:
            PersistenceError: If the write fails
        """
        pass


class InMemoryRecordStore(PersistenceGateway):
    """Keeps records in memory. Staged writes become visible to load() at once."""

    def __init__(self):
        self._records: Dict[EntityKind, Dict[str, Dict[str, Any]]] = {kind: {} for kind in EntityKind}
        self._staged: List[Operation] = []
        self._lock = Lock()

    def _view(self, kind: EntityKind) -> Dict[str, Dict[str, Any]]:
        view = dict(self._records[kind])
        for op, op_kind, entity_id, record in self._staged:
            if op_kind != kind:
                continue
            if op == "insert":
                view[entity_id] = record
            else:
                view.pop(entity_id, None)
        return view

    def load(self, kind: EntityKind) -> list:
        with self._lock:
            records = list(self._view(kind).values())
        return [from_record(kind, r) for r in records]

    def _stage(self, op: str, kind: EntityKind, entity_id: str, record: Optional[Dict[str, Any]]) -> None:
        # Only the latest operation per entity is kept
        self._staged = [s for s in self._staged if (s[1], s[2]) != (kind, entity_id)]
        self._staged.append((op, kind, entity_id, record))

    def insert(self, entity) -> None:
        record = to_record(entity)
        with self._lock:
            self._stage("insert", kind_of(entity), record["id"], record)

    def delete(self, entity) -> None:
        with self._lock:
            self._stage("delete", kind_of(entity), entity.id, None)

    @property
    def staged_count(self) -> int:
        return len(self._staged)

    @property
    def has_pending_changes(self) -> bool:
        return bool(self._staged)

    def commit(self) -> None:
        with self._lock:
            if not self._staged:
                return
            touched = {op_kind for _, op_kind, _, _ in self._staged}
            updated = {kind: self._view(kind) for kind in touched}
            # Staged operations survive a failed write so a later commit can retry them
            self._write(updated)
            self._records.update(updated)
            self._staged = []

    def _write(self, updated: Dict[EntityKind, Dict[str, Dict[str, Any]]]) -> None:
        pass


class JsonRecordStore(InMemoryRecordStore):
    """Stores one JSON file per record kind inside a directory."""

    def __init__(self, storage_dir: str):
        super().__init__()
        self.storage_dir = Path(storage_dir)
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(cause=e) from e
        for kind in EntityKind:
            self._records[kind] = self._read(kind)

    def _path(self, kind: EntityKind) -> Path:
        return self.storage_dir / f"{kind.value}.json"

    def _read(self, kind: EntityKind) -> Dict[str, Dict[str, Any]]:
        path = self._path(kind)
        if not path.exists():
            return {}
        try:
            with open(path, 'r') as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise PersistenceError(kind.value, e) from e
        return {r["id"]: r for r in records}

    def _write(self, updated: Dict[EntityKind, Dict[str, Dict[str, Any]]]) -> None:
        for kind, records in updated.items():
            path = self._path(kind)
            tmp_path = path.with_suffix(".json.tmp")
            try:
                with open(tmp_path, 'w') as f:
                    json.dump(list(records.values()), f, indent=2, ensure_ascii=False)
                tmp_path.replace(path)
            except (OSError, TypeError) as e:
                raise PersistenceError(kind.value, e) from e
            logger.debug("Wrote %d %s records to %s", len(records), kind.value, path)
