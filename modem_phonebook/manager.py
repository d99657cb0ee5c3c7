"""
Phonebook Manager

Manages the phonebook driver registry, named modem configurations and
the per-modem Phonebook instances.
"""

import asyncio
import json
from pathlib import Path
from typing import Dict, List, Optional, Type
import logging

from .config import MODEMS_CONFIG
from .interface import ModemConfig, PhonebookDriver
from .phonebook import Phonebook

logger = logging.getLogger(__name__)


class PhonebookManager:
    """Driver registration table and factory for per-modem phonebooks."""

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = config_path or MODEMS_CONFIG
        self.modems: Dict[str, ModemConfig] = {}
        self.phonebooks: Dict[str, Phonebook] = {}
        self.driver_classes: Dict[str, Type[PhonebookDriver]] = {}
        self._create_locks: Dict[str, asyncio.Lock] = {}

        self._load_modems()

    def register_driver(self, name: str, driver_class: Type[PhonebookDriver]) -> None:
        """Register a driver implementation under ``name``."""
        self.driver_classes[name] = driver_class
        logger.info(f"✅ Registered phonebook driver: {name}")

    def unregister_driver(self, name: str) -> None:
        self.driver_classes.pop(name, None)
        logger.debug(f"Unregistered phonebook driver: {name}")

    def _load_modems(self) -> None:
        """Load modems from config file."""
        if not self.config_path.exists():
            logger.info("No phonebook modems config found, starting fresh")
            return

        try:
            config = json.loads(self.config_path.read_text())
            for name, data in config.get("modems", {}).items():
                self.modems[name] = ModemConfig(
                    name=name,
                    driver=data.get("driver", ""),
                    vendor=int(data.get("vendor", 0)),
                    storages=list(data.get("storages", [])),
                    config=data.get("config", {})
                )
            logger.info(f"✅ Loaded {len(self.modems)} modems")
        except (OSError, ValueError) as e:
            logger.error(f"❌ Failed to load modems: {e}")

    def _save_modems(self) -> None:
        """Save modems to config file."""
        config = {"modems": {}}
        for name, modem in self.modems.items():
            config["modems"][name] = {
                "driver": modem.driver,
                "vendor": modem.vendor,
                "storages": modem.storages,
                "config": modem.config
            }

        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self.config_path.write_text(json.dumps(config, indent=2))

    def add_modem(
        self,
        name: str,
        driver: str,
        vendor: int = 0,
        storages: Optional[List[str]] = None,
        config: Optional[Dict] = None
    ) -> str:
        """Add a new modem configuration."""
        if name in self.modems:
            return f"❌ Modem '{name}' already exists"

        if driver not in self.driver_classes:
            available = ", ".join(self.driver_classes.keys()) or "none"
            return f"❌ Unknown driver '{driver}'. Available: {available}"

        self.modems[name] = ModemConfig(
            name=name,
            driver=driver,
            vendor=vendor,
            storages=storages or [],
            config=config or {}
        )
        self._save_modems()

        return f"✅ Added modem: {name} ({driver})"

    async def remove_modem(self, name: str) -> str:
        """Remove a modem configuration, tearing down its phonebook."""
        if name not in self.modems:
            return f"❌ Modem '{name}' not found"

        await self.remove_phonebook(name)
        del self.modems[name]
        self._save_modems()

        return f"✅ Removed modem: {name}"

    def list_modems(self) -> str:
        """List all configured modems."""
        if not self.modems:
            return "📇 No modems configured"

        lines = ["📇 Modems", "─" * 40]
        for name, modem in self.modems.items():
            active = "🟢" if name in self.phonebooks else "⚪"
            lines.append(f"{active} {name} ({modem.driver})")

        return "\n".join(lines)

    def _create_lock(self, modem_name: str) -> asyncio.Lock:
        return self._create_locks.setdefault(modem_name, asyncio.Lock())

    async def create_phonebook(self, modem: ModemConfig) -> Optional[Phonebook]:
        """Create the phonebook for ``modem`` with the driver registered under its name."""
        async with self._create_lock(modem.name):
            if modem.name in self.phonebooks:
                logger.error(f"Phonebook for {modem.name} already exists")
                return None
            return await self._create(modem)

    async def _create(self, modem: ModemConfig) -> Optional[Phonebook]:
        driver_class = self.driver_classes.get(modem.driver)
        if driver_class is None:
            logger.error(f"Driver not registered: {modem.driver}")
            return None

        driver = driver_class(modem)
        if not await driver.connect():
            logger.error(f"❌ Driver {modem.driver} declined modem {modem.name}")
            return None

        phonebook = Phonebook(modem, driver)
        self.phonebooks[modem.name] = phonebook
        logger.info(f"✅ Created phonebook for {modem.name} ({modem.driver})")
        return phonebook

    async def get_phonebook(self, modem_name: str) -> Optional[Phonebook]:
        """Get or create the phonebook for a configured modem."""
        if modem_name in self.phonebooks:
            return self.phonebooks[modem_name]

        modem = self.modems.get(modem_name)
        if modem is None:
            logger.error(f"Modem not found: {modem_name}")
            return None

        # Concurrent first requests wait for one probe and share its phonebook
        async with self._create_lock(modem_name):
            if modem_name in self.phonebooks:
                return self.phonebooks[modem_name]
            return await self._create(modem)

    async def remove_phonebook(self, modem_name: str) -> None:
        phonebook = self.phonebooks.pop(modem_name, None)
        if phonebook is not None:
            await phonebook.remove()
