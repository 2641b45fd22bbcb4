"""
Global verification ledger.

A flat, insertion-ordered log of every verification issued, kept apart from
the per-product histories so that time-range queries do not have to walk
every product.
"""

from typing import Iterable, List

import structlog

from ..models.domain import LedgerEntry, VerificationResult


class VerificationLedger:
    """Append-only list of (product id, verification) pairs."""

    def __init__(self):
        self._entries: List[LedgerEntry] = []
        self.logger = structlog.get_logger(component="verification_ledger")

    def append(self, product_id: str, result: VerificationResult) -> LedgerEntry:
        entry = LedgerEntry(product_id=product_id, result=result)
        self._entries.append(entry)
        return entry

    def query_range(self, start_timestamp: int, end_timestamp: int) -> List[LedgerEntry]:
        """
        Entries whose verification timestamp lies in ``[start, end]``.

        Both bounds are inclusive and insertion order is preserved. An
        inverted range yields an empty list.
        """
        if start_timestamp > end_timestamp:
            return []

        matches = [
            entry for entry in self._entries
            if start_timestamp <= entry.result.timestamp <= end_timestamp
        ]

        self.logger.debug(
            "Ledger range queried",
            start_timestamp=start_timestamp,
            end_timestamp=end_timestamp,
            match_count=len(matches)
        )
        return matches

    def entries(self) -> List[LedgerEntry]:
        return list(self._entries)

    def load(self, entries: Iterable[LedgerEntry]) -> None:
        self._entries = list(entries)

    def __len__(self) -> int:
        return len(self._entries)
