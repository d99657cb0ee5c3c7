"""Shared fixtures: a scriptable phonebook driver."""
from __future__ import annotations

import asyncio
from typing import Dict, List, Optional

import pytest

from modem_phonebook.interface import FdnEntry, ModemConfig, PhonebookDriver, RawEntry
from modem_phonebook.phonebook import Phonebook


class FakeDriver(PhonebookDriver):
    """Driver whose storages, failures and FDN answers are set per test."""

    driver_name = "fake"

    def __init__(self, modem: ModemConfig):
        super().__init__(modem)
        self.storages: Dict[str, List[RawEntry]] = {}
        self.failing_storages: set = set()
        self.export_calls: List[str] = []
        self.hold: Optional[asyncio.Event] = None
        self.probe_ok = True
        self.disconnected = False

        self.fdn: List[FdnEntry] = []
        self.fdn_error: Optional[Exception] = None
        self.next_index = 1
        self.fdn_calls: List[tuple] = []

    async def connect(self) -> bool:
        return self.probe_ok

    async def disconnect(self) -> None:
        self.disconnected = True

    async def export_entries(self, storage):
        self.export_calls.append(storage)
        if self.hold is not None:
            await self.hold.wait()
        for entry in self.storages.get(storage, []):
            yield entry
        if storage in self.failing_storages:
            raise IOError(f"{storage} unavailable")

    async def _fdn_call(self, *call):
        self.fdn_calls.append(call)
        if self.hold is not None:
            await self.hold.wait()
        if self.fdn_error is not None:
            raise self.fdn_error

    async def read_fdn_entries(self):
        await self._fdn_call("read")
        return list(self.fdn)

    async def insert_fdn_entry(self, name, number, pin2):
        await self._fdn_call("insert", name, number, pin2)
        index = self.next_index
        self.next_index += 1
        return index

    async def update_fdn_entry(self, index, name, number, pin2):
        await self._fdn_call("update", index, name, number, pin2)

    async def delete_fdn_entry(self, index, pin2):
        await self._fdn_call("delete", index, pin2)


class ExportOnlyDriver(PhonebookDriver):
    """Driver without any FDN support."""

    driver_name = "export-only"

    async def export_entries(self, storage):
        for entry in ():
            yield entry


def entry(index=1, text="", number="", type=129, **fields) -> RawEntry:
    return RawEntry(index=index, text=text, number=number, type=type, **fields)


@pytest.fixture
def modem():
    return ModemConfig(name="modem0", driver="fake")


@pytest.fixture
def driver(modem):
    return FakeDriver(modem)


@pytest.fixture
def phonebook(modem, driver):
    return Phonebook(modem, driver)
