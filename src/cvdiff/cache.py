"""
Caller-side memoization of comparison results.

Comparisons are recomputed whenever either document is edited; a cache keyed
by document content avoids recomputing when neither side changed.
"""

import hashlib
import json
import threading
from collections import OrderedDict

from .comparator import CVComparator
from .models import CVComparisonResult, CVDocument


def document_key(document: CVDocument) -> str:
    """SHA-256 digest of a document's canonical JSON form."""
    payload = json.dumps(document.to_dict(), sort_keys=True, ensure_ascii=False)
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class ComparisonCache:
    """
    Bounded LRU cache of comparison results.

    Keys combine both documents' content digests, so editing either
    document naturally misses the cache.
    """

    def __init__(self, comparator: CVComparator | None = None, max_entries: int = 32):
        """
        Initialize the cache.

        Args:
            comparator: Comparator used on cache misses (default settings if None)
            max_entries: Maximum number of cached results
        """
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1: {max_entries}")
        self.comparator = comparator or CVComparator()
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[tuple[str, str], CVComparisonResult] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, original: CVDocument, modified: CVDocument) -> CVComparisonResult:
        """
        Return the cached comparison, computing it on a miss.

        Args:
            original: Original document
            modified: Rewritten document

        Returns:
            CVComparisonResult
        """
        key = (document_key(original), document_key(modified))

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached
            self.misses += 1

        result = self.comparator.compare(original, modified)

        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
