"""Tests for the driver registry and per-modem phonebooks."""
from __future__ import annotations

import asyncio
import json

import pytest

from modem_phonebook.errors import PhonebookBusy
from modem_phonebook.interface import ModemConfig
from modem_phonebook.manager import PhonebookManager

from conftest import FakeDriver


class DecliningDriver(FakeDriver):
    async def connect(self):
        return False


class SlowConnectDriver(FakeDriver):
    """Driver whose connect yields to the loop before answering."""

    connects = 0

    async def connect(self):
        type(self).connects += 1
        await asyncio.sleep(0)
        return True


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "config" / "phonebook_modems.json"


@pytest.fixture
def manager(config_path):
    manager = PhonebookManager(config_path=config_path)
    manager.register_driver("fake", FakeDriver)
    return manager


class TestModemConfig:

    def test_missing_config_starts_empty(self, manager):
        assert manager.modems == {}
        assert manager.list_modems() == "📇 No modems configured"

    def test_loads_modems(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({
            "modems": {
                "ril_0": {"driver": "fake", "vendor": 3, "storages": ["SM"], "config": {"a": 1}},
            }
        }))

        manager = PhonebookManager(config_path=config_path)

        assert manager.modems["ril_0"] == ModemConfig("ril_0", "fake", 3, ["SM"], {"a": 1})

    def test_unreadable_config_is_logged(self, config_path, caplog):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")

        manager = PhonebookManager(config_path=config_path)

        assert manager.modems == {}
        assert "Failed to load modems" in caplog.text

    def test_add_modem_saves_config(self, manager, config_path):
        result = manager.add_modem("ril_0", "fake", storages=["SM"])

        assert result.startswith("✅")
        saved = json.loads(config_path.read_text())
        assert saved["modems"]["ril_0"]["driver"] == "fake"
        assert PhonebookManager(config_path=config_path).modems["ril_0"].storages == ["SM"]

    def test_add_modem_rejects_duplicates_and_unknown_drivers(self, manager):
        manager.add_modem("ril_0", "fake")

        assert manager.add_modem("ril_0", "fake").startswith("❌")
        assert "Available: fake" in manager.add_modem("ril_1", "qmi")

    def test_remove_modem_tears_down_phonebook(self, manager):
        manager.add_modem("ril_0", "fake")
        phonebook = asyncio.run(manager.get_phonebook("ril_0"))

        assert asyncio.run(manager.remove_modem("ril_0")).startswith("✅")
        assert phonebook.removed
        assert phonebook.driver.disconnected
        assert "ril_0" not in manager.modems
        assert asyncio.run(manager.remove_modem("ril_0")).startswith("❌")

    def test_list_modems_marks_active(self, manager):
        manager.add_modem("ril_0", "fake")
        manager.add_modem("ril_1", "fake")
        asyncio.run(manager.get_phonebook("ril_1"))

        listing = manager.list_modems()
        assert "⚪ ril_0 (fake)" in listing
        assert "🟢 ril_1 (fake)" in listing


class TestPhonebookFactory:

    def test_driver_looked_up_by_exact_name(self, manager):
        manager.register_driver("fake-declining", DecliningDriver)

        phonebook = asyncio.run(manager.create_phonebook(ModemConfig("m", "fake")))

        assert type(phonebook.driver) is FakeDriver
        assert phonebook.driver.modem.name == "m"

    def test_unknown_driver(self, manager):
        assert asyncio.run(manager.create_phonebook(ModemConfig("m", "Fake"))) is None
        assert manager.phonebooks == {}

    def test_declined_probe(self, manager):
        manager.register_driver("declining", DecliningDriver)

        assert asyncio.run(manager.create_phonebook(ModemConfig("m", "declining"))) is None

    def test_one_phonebook_per_modem(self, manager):
        modem = ModemConfig("m", "fake")
        first = asyncio.run(manager.create_phonebook(modem))

        assert first is not None
        assert asyncio.run(manager.create_phonebook(modem)) is None
        assert manager.phonebooks["m"] is first

    def test_get_phonebook_reuses_instance(self, manager):
        manager.add_modem("ril_0", "fake")

        async def scenario():
            return await manager.get_phonebook("ril_0"), await manager.get_phonebook("ril_0")

        first, second = asyncio.run(scenario())
        assert first is second

    def test_get_phonebook_for_unknown_modem(self, manager):
        assert asyncio.run(manager.get_phonebook("nope")) is None

    def test_unregister_driver(self, manager):
        manager.unregister_driver("fake")

        assert asyncio.run(manager.create_phonebook(ModemConfig("m", "fake"))) is None

    def test_instances_are_independent(self, manager):
        async def scenario():
            a = await manager.create_phonebook(ModemConfig("a", "fake"))
            b = await manager.create_phonebook(ModemConfig("b", "fake"))
            a.driver.hold = asyncio.Event()
            task = asyncio.create_task(a.export())
            await asyncio.sleep(0)
            vcards = await b.export()
            a.driver.hold.set()
            await task
            return vcards

        assert asyncio.run(scenario()) == ""


class TestConcurrentCreation:

    @pytest.fixture
    def slow_manager(self, manager):
        SlowConnectDriver.connects = 0
        manager.register_driver("slow", SlowConnectDriver)
        manager.add_modem("ril_0", "slow")
        return manager

    def test_concurrent_first_requests_share_one_phonebook(self, slow_manager):
        async def scenario():
            a, b = await asyncio.gather(
                slow_manager.get_phonebook("ril_0"),
                slow_manager.get_phonebook("ril_0"),
            )
            a.driver.hold = asyncio.Event()
            task = asyncio.create_task(a.export())
            await asyncio.sleep(0)
            with pytest.raises(PhonebookBusy):
                await b.export_fdn()
            a.driver.hold.set()
            await task
            return a, b

        a, b = asyncio.run(scenario())
        assert a is b
        assert slow_manager.phonebooks["ril_0"] is a
        assert SlowConnectDriver.connects == 1

    def test_concurrent_create_yields_one_phonebook(self, slow_manager):
        modem = slow_manager.modems["ril_0"]

        async def scenario():
            return await asyncio.gather(
                slow_manager.create_phonebook(modem),
                slow_manager.create_phonebook(modem),
            )

        results = asyncio.run(scenario())
        created = [p for p in results if p is not None]
        assert len(created) == 1
        assert slow_manager.phonebooks["ril_0"] is created[0]
        assert SlowConnectDriver.connects == 1
