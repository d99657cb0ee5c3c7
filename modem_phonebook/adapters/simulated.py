"""
Simulated Phonebook Driver

Implements PhonebookDriver from static data in the modem configuration,
for bench setups without a modem attached. Expected config:

    {
        "storages": {"SM": [{"index": 1, "number": "555", "type": 129, "text": "Bob/h"}]},
        "failing_storages": ["ME"],
        "fdn": [{"index": 1, "name": "Home", "number": "5551234"}],
        "fdn_capacity": 10,
        "pin2": "1234"
    }
"""

import logging
from typing import AsyncIterator, Dict, List

from ..interface import FdnEntry, ModemConfig, PhonebookDriver, RawEntry

logger = logging.getLogger(__name__)

DEFAULT_FDN_CAPACITY = 10


class SimulatedPhonebookDriver(PhonebookDriver):
    """Phonebook driver backed by the modem's config block."""

    driver_name = "simulated"

    def __init__(self, modem: ModemConfig):
        super().__init__(modem)
        config = modem.config
        self._storages: Dict[str, List[dict]] = config.get("storages", {})
        self._failing = set(config.get("failing_storages", []))
        self._capacity = int(config.get("fdn_capacity", DEFAULT_FDN_CAPACITY))
        self._pin2 = config.get("pin2")
        self._fdn: Dict[int, FdnEntry] = {}
        for data in config.get("fdn", []):
            entry = FdnEntry(int(data["index"]), data.get("name", ""), data.get("number", ""))
            self._fdn[entry.index] = entry

    async def connect(self) -> bool:
        logger.info(f"✅ Simulated phonebook attached to {self.modem.name}")
        return True

    async def export_entries(self, storage: str) -> AsyncIterator[RawEntry]:
        for data in self._storages.get(storage, []):
            yield RawEntry.from_dict(data)

        if storage in self._failing:
            raise IOError(f"Storage {storage} not accessible")

    async def read_fdn_entries(self) -> List[FdnEntry]:
        return [FdnEntry(e.index, e.name, e.number) for _, e in sorted(self._fdn.items())]

    def _check_pin2(self, pin2: str) -> None:
        if self._pin2 is not None and pin2 != self._pin2:
            raise PermissionError("Incorrect password")

    async def insert_fdn_entry(self, name: str, number: str, pin2: str) -> int:
        self._check_pin2(pin2)
        for index in range(1, self._capacity + 1):
            if index not in self._fdn:
                self._fdn[index] = FdnEntry(index, name, number)
                return index
        raise IOError("Memory full")

    async def update_fdn_entry(self, index: int, name: str, number: str, pin2: str) -> None:
        self._check_pin2(pin2)
        if not 1 <= index <= self._capacity:
            raise IndexError("Invalid index")
        self._fdn[index] = FdnEntry(index, name, number)

    async def delete_fdn_entry(self, index: int, pin2: str) -> None:
        self._check_pin2(pin2)
        if not 1 <= index <= self._capacity:
            raise IndexError("Invalid index")
        self._fdn.pop(index, None)
