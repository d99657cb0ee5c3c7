"""
Phonebook Driver Interface

Core abstraction for modem phonebook drivers. Drivers implement this
interface to expose a modem's contact storages and its FDN (Fixed Dialing
Number) file to the phonebook service.
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional
from dataclasses import dataclass, field
from enum import Enum


class Category(Enum):
    """Number category, derived from the merge marker letter."""
    HOME = "home"
    MOBILE = "mobile"
    FAX = "fax"
    WORK = "work"
    OTHER = "other"

    @classmethod
    def from_marker(cls, letter: str) -> "Category":
        return _MARKER_CATEGORIES.get(letter.lower(), cls.OTHER)


_MARKER_CATEGORIES = {
    "w": Category.WORK,
    "h": Category.HOME,
    "m": Category.MOBILE,
    "f": Category.FAX,
}


@dataclass
class RawEntry:
    """One entry as delivered by a driver storage enumeration."""
    index: int
    number: str = ""
    type: int = 0
    text: str = ""
    hidden: bool = False
    group: str = ""
    adnumber: str = ""
    adtype: int = 0
    secondtext: str = ""
    email: str = ""
    sip_uri: str = ""
    tel_uri: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawEntry":
        return cls(
            index=int(data.get("index", 0)),
            number=data.get("number") or "",
            type=int(data.get("type") or 0),
            text=data.get("text") or "",
            hidden=bool(data.get("hidden", False)),
            group=data.get("group") or "",
            adnumber=data.get("adnumber") or "",
            adtype=int(data.get("adtype") or 0),
            secondtext=data.get("secondtext") or "",
            email=data.get("email") or "",
            sip_uri=data.get("sip_uri") or "",
            tel_uri=data.get("tel_uri") or "",
        )


@dataclass
class NumberEntry:
    """A number collected for a merged person."""
    number: str
    type: int
    category: Category = Category.OTHER


@dataclass
class PersonRecord:
    """A logical person merged from one or more raw entries."""
    text: str
    numbers: List[NumberEntry] = field(default_factory=list)
    group: Optional[str] = None
    email: Optional[str] = None
    sip_uri: Optional[str] = None


@dataclass
class FdnEntry:
    """A Fixed Dialing Number record."""
    index: int
    name: str
    number: str

    def as_tuple(self) -> tuple:
        return (self.index, self.name, self.number)


@dataclass
class ModemConfig:
    """A named modem configuration."""
    name: str
    driver: str
    vendor: int = 0
    storages: List[str] = field(default_factory=list)
    config: Dict[str, Any] = field(default_factory=dict)


class PhonebookDriver(ABC):
    """
    Base class for modem phonebook drivers.

    ``export_entries`` is mandatory. The FDN operations are optional: a
    driver that does not override one of them does not implement it, and
    the phonebook reports NotImplemented for the matching request.
    Failures are reported by raising.
    """

    driver_name: str = "base"

    def __init__(self, modem: ModemConfig):
        self.modem = modem

    async def connect(self) -> bool:
        """Probe the modem. Return False to decline it."""
        return True

    async def disconnect(self) -> None:
        """Release driver resources when the phonebook is removed."""
        pass

    @abstractmethod
    def export_entries(self, storage: str) -> AsyncIterator[RawEntry]:
        """Yield every entry of one storage (e.g. "SM", "ME") in order."""
        pass

    async def read_fdn_entries(self) -> List[FdnEntry]:
        """Read the whole FDN file."""
        raise NotImplementedError

    async def insert_fdn_entry(self, name: str, number: str, pin2: str) -> int:
        """Write a new FDN record. Returns the record index the SIM assigned."""
        raise NotImplementedError

    async def update_fdn_entry(self, index: int, name: str, number: str, pin2: str) -> None:
        """Overwrite the FDN record at ``index``."""
        raise NotImplementedError

    async def delete_fdn_entry(self, index: int, pin2: str) -> None:
        """Erase the FDN record at ``index``."""
        raise NotImplementedError

    def implements(self, operation: str) -> bool:
        """Whether this driver overrides the named optional operation."""
        return getattr(type(self), operation) is not getattr(PhonebookDriver, operation)
