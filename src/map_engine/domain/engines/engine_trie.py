# map_engine/domain/engines/engine_trie.py
import re
from collections.abc import Iterator

from map_engine.domain.entities.geography import LocationRecord
from map_engine.domain.errors import IndexFrozenError

_NON_ALPHA = re.compile(r"[^a-zA-Z ]")


def normalize_name(s: str | None) -> str:
    """Key form of a location name: ASCII letters and spaces only, lower-cased."""
    if not s:
        return ""
    return _NON_ALPHA.sub("", s).lower()


def _index_key(raw: str | None) -> str:
    key = normalize_name(raw)
    # a key needs at least one letter
    return key if key.strip() else ""


class TrieNode:
    """
    children: char -> TrieNode
    terminal: True iff some inserted key ends exactly here
    records: payload for terminal nodes (empty otherwise)
    """

    __slots__ = ("children", "terminal", "records")

    def __init__(self) -> None:
        self.children: dict[str, TrieNode] = {}
        self.terminal = False
        self.records: list[LocationRecord] = []

    def names(self) -> list[str]:
        # distinct raw names in insertion order
        return list(dict.fromkeys(r.name for r in self.records))


class Completions:
    """Lazy, finite, restartable pre-order walk over the terminals below a node."""

    def __init__(self, start: TrieNode | None):
        self._start = start

    def __iter__(self) -> Iterator[str]:
        if self._start is None:
            return
        stack = [self._start]
        while stack:
            node = stack.pop()
            if node.terminal:
                yield from node.names()
            # reversed so children are visited in insertion order
            stack.extend(reversed(node.children.values()))

    def __bool__(self) -> bool:
        return self._start is not None

    def to_list(self, limit: int | None = None) -> list[str]:
        out = []
        for name in self:
            if limit is not None and len(out) >= limit:
                break
            out.append(name)
        return out


class PrefixIndex:
    """Trie over normalized location names, populated during load and read-only after."""

    def __init__(self) -> None:
        self._root = TrieNode()
        self._keys = 0
        self._records = 0
        self._frozen = False

    def freeze(self) -> "PrefixIndex":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def insert(self, raw_name: str, record: LocationRecord | None = None) -> bool:
        """Index ``raw_name``; returns False when its normalized key has no letters."""
        if self._frozen:
            raise IndexFrozenError("name index is read-only after freeze()")
        key = _index_key(raw_name)
        if not key:
            return False
        node = self._root
        for ch in key:
            nxt = node.children.get(ch)
            if nxt is None:
                nxt = node.children[ch] = TrieNode()
            node = nxt
        if not node.terminal:
            node.terminal = True
            self._keys += 1
        node.records.append(record if record is not None else LocationRecord(raw_name))
        self._records += 1
        return True

    def _walk(self, key: str) -> TrieNode | None:
        node = self._root
        for ch in key:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def lookup_exact(self, raw_key: str) -> list[LocationRecord]:
        key = _index_key(raw_key)
        if not key:
            return []
        node = self._walk(key)
        if node is None or not node.terminal:
            return []
        return list(node.records)

    def autocomplete(self, raw_prefix: str) -> Completions:
        prefix = _index_key(raw_prefix)
        if not prefix:
            return Completions(None)
        return Completions(self._walk(prefix))

    def __contains__(self, raw_key: str) -> bool:
        key = _index_key(raw_key)
        node = self._walk(key) if key else None
        return node is not None and node.terminal

    @property
    def key_count(self) -> int:
        return self._keys

    @property
    def record_count(self) -> int:
        return self._records
