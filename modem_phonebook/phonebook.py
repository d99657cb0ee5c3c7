"""
Modem Phonebook

One Phonebook per modem. It exports the modem's contact storages as a
single vCard document and manages the SIM's FDN file through the driver.

Every request goes through the phonebook's RequestGate: while one request
is outstanding, any other request is refused with Busy.
"""

import logging
from enum import Enum
from typing import Awaitable, List, Optional, Sequence, TypeVar

from .config import DEFAULT_STORAGES
from .errors import (
    PhonebookFailed, PhonebookInvalidFormat, PhonebookNotImplemented, PhonebookNotReady
)
from .fdn import FdnStore, is_valid_pin2, valid_phone_number_format
from .gate import RequestGate, RequestKind
from .interface import FdnEntry, ModemConfig, PhonebookDriver
from .merge import MergeEngine
from .vcard import VCardWriter

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExportState(Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    CACHED = "cached"


class Phonebook:
    """Contact export and FDN management for one modem.

    The exported document is computed once and then served from cache for
    the lifetime of the phonebook; there is no refresh short of removing
    the phonebook and creating a new one.
    """

    def __init__(self, modem: ModemConfig, driver: PhonebookDriver,
                 storages: Optional[Sequence[str]] = None):
        self.modem = modem
        self.driver = driver
        self.storages = list(storages or modem.storages or DEFAULT_STORAGES)
        self.gate = RequestGate()

        self.export_state = ExportState.IDLE
        self.storage_index = 0
        self._vcards = ""
        self._fdn = FdnStore()
        self._removed = False

    @property
    def fdn_cached(self) -> bool:
        return self._fdn.cached

    @property
    def removed(self) -> bool:
        return self._removed

    # Contacts export

    async def export(self) -> str:
        """Return all storages as one vCard document, merged by person."""
        self._check_present()
        with self.gate.hold(RequestKind.EXPORT):
            if self.export_state is ExportState.CACHED:
                return self._vcards

            self.export_state = ExportState.IN_PROGRESS
            try:
                vcards = await self._export_storages()
                self._check_present()
            except BaseException:
                self.export_state = ExportState.IDLE
                raise

            self._vcards = vcards
            self.export_state = ExportState.CACHED
            logger.info(f"✅ Exported phonebook of {self.modem.name} ({len(vcards)} chars)")
            return vcards

    async def _export_storages(self) -> str:
        writer = VCardWriter()
        merger = MergeEngine()

        for index, storage in enumerate(self.storages):
            self.storage_index = index
            logger.debug(f"Exporting storage {storage} of {self.modem.name}")
            try:
                async for entry in self.driver.export_entries(storage):
                    standalone = merger.observe(entry)
                    if standalone is not None:
                        writer.write_entry(standalone)
            except Exception as e:
                logger.error(f"❌ Export of storage {storage} failed: {e}")

        for person in merger.flush():
            writer.write_person(person)

        return writer.getvalue()

    # FDN

    async def export_fdn(self) -> List[FdnEntry]:
        """Return the FDN entries ordered by index, reading the SIM on first use."""
        self._require("read_fdn_entries")
        with self.gate.hold(RequestKind.FDN_READ):
            if self._fdn.cached:
                return self._fdn.entries()

            entries = await self._call_driver("FDN read", self.driver.read_fdn_entries())
            self._fdn.load(entries)
            logger.info(f"✅ Read {len(self._fdn)} FDN entries from {self.modem.name}")
            return self._fdn.entries()

    async def insert_fdn(self, name: str, number: str, pin2: str) -> int:
        """Write a new FDN entry. Returns the index the SIM assigned to it."""
        self._require("insert_fdn_entry")
        with self.gate.hold(RequestKind.FDN_INSERT):
            self._check_fdn_request(number, pin2)
            index = await self._call_driver(
                "FDN insert", self.driver.insert_fdn_entry(name, number, pin2)
            )
            self._fdn.insert(index, name, number)
            return index

    async def update_fdn(self, name: str, number: str, pin2: str, index: int) -> None:
        """Rewrite the FDN entry at ``index``.

        If the index is not in the local map the modem's success is still
        reported and the map is left as is.
        """
        self._require("update_fdn_entry")
        with self.gate.hold(RequestKind.FDN_UPDATE):
            self._check_fdn_request(number, pin2)
            await self._call_driver(
                "FDN update", self.driver.update_fdn_entry(index, name, number, pin2)
            )
            if not self._fdn.update(index, name, number):
                logger.debug(f"FDN update of unknown index {index} on {self.modem.name}")

    async def delete_fdn(self, pin2: str, index: int) -> None:
        """Erase the FDN entry at ``index``; an unknown index is not an error."""
        self._require("delete_fdn_entry")
        with self.gate.hold(RequestKind.FDN_DELETE):
            self._check_fdn_request(None, pin2)
            await self._call_driver("FDN delete", self.driver.delete_fdn_entry(index, pin2))
            if not self._fdn.delete(index):
                logger.debug(f"FDN delete of unknown index {index} on {self.modem.name}")

    def _check_fdn_request(self, number: Optional[str], pin2: str) -> None:
        if not self._fdn.cached:
            logger.error(f"❌ FDN change on {self.modem.name} before reading the FDN entries")
            raise PhonebookNotReady()

        if number is not None and not valid_phone_number_format(number):
            raise PhonebookInvalidFormat(f"Invalid phone number: {number!r}")

        if not is_valid_pin2(pin2):
            raise PhonebookInvalidFormat("Invalid PIN2")

    async def _call_driver(self, what: str, call: Awaitable[T]) -> T:
        try:
            result = await call
        except Exception as e:
            logger.error(f"❌ {what} failed on {self.modem.name}: {e}")
            raise PhonebookFailed(f"{what} failed") from e

        # Removed while the modem was working: its answer is dropped
        self._check_present()
        return result

    # Lifecycle

    def _check_present(self) -> None:
        if self._removed:
            raise PhonebookFailed(f"Phonebook of {self.modem.name} was removed")

    def _require(self, operation: str) -> None:
        self._check_present()
        if not self.driver.implements(operation):
            raise PhonebookNotImplemented()

    async def remove(self) -> None:
        """Tear down: drop all cached state and release the driver."""
        if self._removed:
            return

        self._removed = True
        if self.gate.held is not None:
            logger.warning(f"Removing {self.modem.name} with {self.gate.held.value} outstanding")

        self._vcards = ""
        self.export_state = ExportState.IDLE
        self._fdn.clear()
        await self.driver.disconnect()
        logger.info(f"✅ Removed phonebook of {self.modem.name}")
