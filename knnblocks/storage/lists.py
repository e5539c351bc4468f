"""Named list storage owned by each target.

The host keeps user-visible list variables per sprite/stage; the
classifier only needs to read a list by name and replace its contents.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence
import json
import threading


@dataclass
class ListVariable:
    id: str
    name: str
    value: List[str] = field(default_factory=list)


class ListStore:
    def lookup(self, name: str) -> Optional[ListVariable]:
        raise NotImplementedError

    def lookup_or_create(self, list_id: str, name: str) -> ListVariable:
        raise NotImplementedError

    def write(self, name: str, lines: Sequence[str]) -> None:
        raise NotImplementedError

    def names(self) -> List[str]:
        raise NotImplementedError

    def read(self, name: str) -> Optional[List[str]]:
        variable = self.lookup(name)
        if variable is None:
            return None
        return list(variable.value)


class MemoryListStore(ListStore):
    def __init__(self, lists: Optional[Dict[str, Sequence[str]]] = None) -> None:
        self._lists: Dict[str, ListVariable] = {}
        self._lock = threading.Lock()
        for name, lines in (lists or {}).items():
            self._lists[name] = ListVariable(id=name, name=name, value=list(lines))

    def lookup(self, name: str) -> Optional[ListVariable]:
        with self._lock:
            return self._lists.get(name)

    def lookup_or_create(self, list_id: str, name: str) -> ListVariable:
        with self._lock:
            variable = self._lists.get(name)
            if variable is None:
                variable = ListVariable(id=list_id, name=name)
                self._lists[name] = variable
            return variable

    def write(self, name: str, lines: Sequence[str]) -> None:
        with self._lock:
            variable = self._lists.get(name)
            if variable is None:
                variable = ListVariable(id=name, name=name)
                self._lists[name] = variable
            variable.value = list(lines)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._lists)


class JsonListStore(ListStore):
    """Lists of one target kept in ``<base_dir>/<target_id>.json``."""

    def __init__(self, base_dir: str, target_id: str) -> None:
        self._base_dir = Path(base_dir)
        self._base_dir.mkdir(parents=True, exist_ok=True)
        self._path = self._base_dir / f"{target_id}.json"
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, ListVariable]:
        if not self._path.exists():
            return {}
        payload = json.loads(self._path.read_text(encoding="utf-8"))
        return {
            name: ListVariable(id=str(item.get("id", name)), name=name, value=list(item.get("value", [])))
            for name, item in payload.get("lists", {}).items()
        }

    def _save(self, lists: Dict[str, ListVariable]) -> None:
        payload = {
            "lists": {
                name: {"id": variable.id, "value": list(variable.value)}
                for name, variable in lists.items()
            }
        }
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def lookup(self, name: str) -> Optional[ListVariable]:
        with self._lock:
            return self._load().get(name)

    def lookup_or_create(self, list_id: str, name: str) -> ListVariable:
        with self._lock:
            lists = self._load()
            variable = lists.get(name)
            if variable is None:
                variable = ListVariable(id=list_id, name=name)
                lists[name] = variable
                self._save(lists)
            return variable

    def write(self, name: str, lines: Sequence[str]) -> None:
        with self._lock:
            lists = self._load()
            variable = lists.get(name)
            if variable is None:
                variable = ListVariable(id=name, name=name)
                lists[name] = variable
            variable.value = list(lines)
            self._save(lists)

    def names(self) -> List[str]:
        with self._lock:
            return list(self._load())


@dataclass
class Target:
    """A sprite or stage: an opaque id plus the lists it owns."""
    id: str
    lists: ListStore = field(default_factory=MemoryListStore)
