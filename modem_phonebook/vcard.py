"""
vCard 3.0 Writer

Renders phonebook entries into vCard text (RFC 2426), folding long lines
as RFC 2425 asks. Output accumulates in the writer until ``getvalue``.
"""

from typing import List, Optional

from .config import TYPE_INTERNATIONAL, VCARD_LINE_END, VCARD_LINE_WIDTH
from .interface import Category, PersonRecord, RawEntry

CATEGORY_LABELS = {
    Category.HOME: "HOME,VOICE",
    Category.MOBILE: "CELL,VOICE",
    Category.FAX: "FAX",
    Category.WORK: "WORK,VOICE",
    Category.OTHER: "VOICE",
}

# RFC 2426 section 4: characters escaped in text values
_ESCAPES = {
    "\n": "\\n",
    "\r": "\\r",
    "\\": "\\\\",
    ";": "\\;",
    ",": "\\,",
}


def escape_text(value: str) -> str:
    """Backslash-escape newline, carriage return, backslash, semicolon and comma."""
    return "".join(_ESCAPES.get(c, c) for c in value)


def fold_line(line: str, width: int = VCARD_LINE_WIDTH) -> str:
    """
    Fold one logical line into physical lines of at most ``width`` characters.

    Continuation lines start with a single space. The result ends with a
    line terminator; an empty line yields just the terminator.
    """
    chunks = [line[i:i + width] for i in range(0, len(line), width)] or [""]
    return (VCARD_LINE_END + " ").join(chunks) + VCARD_LINE_END


class VCardWriter:
    """Append-only vCard buffer.

    Calls are not checked for ordering; callers open a card with ``begin``
    and close it with ``end``.
    """

    def __init__(self):
        self._parts: List[str] = []

    def _line(self, line: str) -> None:
        self._parts.append(fold_line(line))

    def begin(self) -> None:
        self._parts.append("BEGIN:VCARD" + VCARD_LINE_END)
        self._parts.append("VERSION:3.0" + VCARD_LINE_END)

    def end(self) -> None:
        self._parts.append("END:VCARD" + VCARD_LINE_END)
        self._parts.append(VCARD_LINE_END)

    def name(self, text: str) -> None:
        self._line(f"FN:{escape_text(text)}")

    def number(self, number: Optional[str], type: int, category: Category = Category.OTHER) -> None:
        if not number or not type:
            return

        intl = "+" if type == TYPE_INTERNATIONAL and not number.startswith("+") else ""
        self._line(f"TEL;TYPE={CATEGORY_LABELS[category]}:{intl}{number}")

    def group(self, group: Optional[str]) -> None:
        if group:
            self._line(f"CATEGORIES:{escape_text(group)}")

    def email(self, email: Optional[str]) -> None:
        if email:
            self._line(f"EMAIL;TYPE=INTERNET:{escape_text(email)}")

    def sip_uri(self, sip_uri: Optional[str]) -> None:
        if sip_uri:
            self._line(f"IMPP;TYPE=SIP:{escape_text(sip_uri)}")

    def write_entry(self, entry: RawEntry) -> None:
        """Render a raw entry as its own card, all numbers tagged Other."""
        self.begin()
        self.name(entry.text or entry.number)
        self.number(entry.number, entry.type, Category.OTHER)
        self.number(entry.adnumber, entry.adtype, Category.OTHER)
        self.group(entry.group)
        self.email(entry.email)
        self.sip_uri(entry.sip_uri)
        self.end()

    def write_person(self, person: PersonRecord) -> None:
        """Render a merged person as one card."""
        self.begin()
        self.name(person.text)
        for n in person.numbers:
            self.number(n.number, n.type, n.category)
        self.group(person.group)
        self.email(person.email)
        self.sip_uri(person.sip_uri)
        self.end()

    def getvalue(self) -> str:
        return "".join(self._parts)

    def clear(self) -> None:
        self._parts.clear()
