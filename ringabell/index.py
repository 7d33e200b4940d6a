"""
In-memory fingerprint index and vote-based matcher.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 10


class SearchResult(BaseModel):
    """Outcome of a search; a miss is reported as ("Not found", 0)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    NOT_FOUND: ClassVar[str] = "Not found"

    song_name: str = Field(alias="songName")
    score: int = 0

    @classmethod
    def not_found(cls) -> "SearchResult":
        return cls(song_name=cls.NOT_FOUND, score=0)

    @property
    def found(self) -> bool:
        return not (self.song_name == self.NOT_FOUND and self.score == 0)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


@dataclass(frozen=True)
class RegisteredEntry:
    label: str
    fingerprints: Tuple[int, ...]
    _lookup: FrozenSet[int] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_lookup", frozenset(self.fingerprints))

    def score(self, query: Iterable[int]) -> int:
        """Number of query hashes present in this entry, repeats included."""
        lookup = self._lookup
        return sum(1 for fp in query if fp in lookup)


class FingerprintIndex:
    """
    Append-only collection of registered recordings.

    Register and search may be called from several threads; appends and
    snapshots happen under one lock, and entries never change once added.
    """

    def __init__(self, min_score: int = DEFAULT_MIN_SCORE):
        self.min_score = min_score
        self._entries: List[RegisteredEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def entries(self) -> Tuple[RegisteredEntry, ...]:
        with self._lock:
            return tuple(self._entries)

    def labels(self) -> List[str]:
        return [entry.label for entry in self.entries]

    def register(self, label: str, fingerprints: Iterable[int]) -> RegisteredEntry:
        """
        Append a new entry. Registering a label twice keeps both entries.

        Args:
            label: Name reported on a match
            fingerprints: Hashes generated for the recording

        Returns:
            The stored entry
        """
        entry = RegisteredEntry(label, tuple(int(fp) for fp in fingerprints))
        with self._lock:
            self._entries.append(entry)
            position = len(self._entries)
        logger.info(
            "Registered '%s' with %d fingerprints (entry #%d)",
            label,
            len(entry.fingerprints),
            position,
        )
        return entry

    def scores(self, fingerprints: Iterable[int]) -> List[int]:
        """Score of every entry against the query, in registration order."""
        query = list(fingerprints)
        return [entry.score(query) for entry in self.entries]

    def search(self, fingerprints: Iterable[int]) -> SearchResult:
        """
        Find the entry sharing the most hashes with the query.

        Ties go to the entry registered first. The best entry is reported
        only if its score reaches ``min_score``.
        """
        query = list(fingerprints)
        best_index: Optional[int] = None
        best_score = 0
        entries = self.entries

        for i, entry in enumerate(entries):
            score = entry.score(query)
            if score > best_score:
                best_index, best_score = i, score

        if best_index is None or best_score < self.min_score:
            logger.info(
                "No match for %d query fingerprints (best score %d, threshold %d)",
                len(query),
                best_score,
                self.min_score,
            )
            return SearchResult.not_found()

        label = entries[best_index].label
        logger.info("Matched '%s' with score %d", label, best_score)
        return SearchResult(song_name=label, score=best_score)
