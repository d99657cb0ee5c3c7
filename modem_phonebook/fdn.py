"""
FDN (Fixed Dialing Number) store.

In-memory copy of the SIM's FDN file, keyed by record index. The SIM is
the system of record; this map only mirrors what the modem confirmed.
"""

import string
from typing import Dict, Iterable, List, Optional

from .config import MAX_PHONE_NUMBER_LENGTH, PIN2_MAX_LENGTH, PIN2_MIN_LENGTH
from .interface import FdnEntry

NUMBER_CHARS = string.digits + "*#,;"


def valid_number_format(number: str, max_length: int) -> bool:
    """Optional leading '+', then 1..max_length digits or '*', '#', ',', ';'."""
    digits = number[1:] if number.startswith("+") else number
    if not digits or len(digits) > max_length:
        return False
    return all(c in NUMBER_CHARS for c in digits)


def valid_phone_number_format(number: str) -> bool:
    return valid_number_format(number, MAX_PHONE_NUMBER_LENGTH)


def is_valid_pin2(pin2: str) -> bool:
    """PIN2 is 4 to 8 decimal digits."""
    return (
        PIN2_MIN_LENGTH <= len(pin2) <= PIN2_MAX_LENGTH
        and all(c in string.digits for c in pin2)
    )


class FdnStore:
    """Ordered-by-index FDN map with an Unread/Cached flag."""

    def __init__(self):
        self._entries: Dict[int, FdnEntry] = {}
        self.cached = False

    def load(self, entries: Iterable[FdnEntry]) -> None:
        """Replace the map with a complete read of the FDN file."""
        self._entries = {e.index: FdnEntry(e.index, e.name, e.number) for e in entries}
        self.cached = True

    def entries(self) -> List[FdnEntry]:
        """Snapshot of the map ordered by index; later changes do not show through."""
        return [FdnEntry(e.index, e.name, e.number) for _, e in sorted(self._entries.items())]

    def get(self, index: int) -> Optional[FdnEntry]:
        entry = self._entries.get(index)
        return FdnEntry(entry.index, entry.name, entry.number) if entry else None

    def insert(self, index: int, name: str, number: str) -> None:
        self._entries[index] = FdnEntry(index=index, name=name, number=number)

    def update(self, index: int, name: str, number: str) -> bool:
        """Rewrite an existing record. Returns False if there was none."""
        entry = self._entries.get(index)
        if entry is None:
            return False
        entry.name = name
        entry.number = number
        return True

    def delete(self, index: int) -> bool:
        """Drop a record. Returns False if there was none."""
        return self._entries.pop(index, None) is not None

    def clear(self) -> None:
        self._entries.clear()
        self.cached = False

    def __len__(self):
        return len(self._entries)

    def __contains__(self, index):
        return index in self._entries
