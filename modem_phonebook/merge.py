"""
Entry merging.

SIM phonebooks have one number per entry, so handsets store a person with
several numbers as several entries whose names differ only by a "/x"
suffix ("Bob/h", "Bob/m"). Such entries are collected here into one
PersonRecord per base name; all other entries pass straight through.
"""

import logging
from typing import Dict, List, Optional

from .interface import Category, NumberEntry, PersonRecord, RawEntry

logger = logging.getLogger(__name__)

MARKER_LETTERS = "whmfo"


def need_merge(text: Optional[str]) -> bool:
    """Whether ``text`` ends with a "/w", "/h", "/m", "/f" or "/o" marker."""
    if not text or len(text) < 2:
        return False
    return text[-2] == "/" and text[-1].lower() in MARKER_LETTERS


def _merge_field(current: Optional[str], value: Optional[str]) -> Optional[str]:
    if current is None and value:
        return value
    return current


class MergeEngine:
    """Groups marker-suffixed entries by base name across one export pass.

    Groups are kept in the order their base name was first seen; a dict
    gives both the lookup by name and that order.
    """

    def __init__(self):
        self._people: Dict[str, PersonRecord] = {}

    def observe(self, entry: RawEntry) -> Optional[RawEntry]:
        """
        Take one entry in arrival order.

        Returns the entry when it must be written out on its own right now,
        or None when it was absorbed into a group (or had nothing to write).
        """
        if not entry.number and not entry.text:
            return None

        if not need_merge(entry.text):
            return entry

        # An entry named just "/h" has an empty base name and still groups
        base = entry.text[:-2]
        category = Category.from_marker(entry.text[-1])

        person = self._people.get(base)
        if person is None:
            person = PersonRecord(text=base)
            self._people[base] = person
            logger.debug(f"Opened merge group {base!r} at index {entry.index}")

        for number, number_type in ((entry.number, entry.type), (entry.adnumber, entry.adtype)):
            if number and number_type:
                person.numbers.append(NumberEntry(number=number, type=number_type, category=category))

        person.group = _merge_field(person.group, entry.group)
        person.email = _merge_field(person.email, entry.email)
        person.sip_uri = _merge_field(person.sip_uri, entry.sip_uri)
        return None

    def flush(self) -> List[PersonRecord]:
        """Return all groups in first-seen order and reset."""
        people = list(self._people.values())
        self._people = {}
        return people

    def __len__(self):
        return len(self._people)
