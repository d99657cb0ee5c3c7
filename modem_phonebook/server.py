"""
Modem Phonebook MCP Server

Request/reply surface for the phonebook service:
- Export: all contact storages of a modem as one vCard document
- FDN: read, insert, update and delete Fixed Dialing Number entries
- Modems: add, remove and list modem configurations
"""

import logging
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP

from .adapters import DRIVERS
from .config import LOG_LEVEL, SERVER_HOST, SERVER_PORT
from .errors import PhonebookError
from .manager import PhonebookManager

logger = logging.getLogger(__name__)

mcp = FastMCP("Modem Phonebook")

manager = PhonebookManager()
for _name, _driver_class in DRIVERS.items():
    manager.register_driver(_name, _driver_class)

# =============================================================================
# HELPERS
# =============================================================================
def _error(e: PhonebookError) -> str:
    return f"❌ {e}"


def _no_phonebook(modem: str) -> str:
    return f"❌ Failed: No phonebook available for modem '{modem}'"


# =============================================================================
# HEALTH
# =============================================================================
@mcp.tool()
def ping() -> str:
    """Health check. Returns pong if the phonebook server is running."""
    return "pong from Modem Phonebook 📇"


@mcp.tool()
def phonebook_list_modems() -> str:
    """List configured modems and whether their phonebook is active."""
    return manager.list_modems()


# =============================================================================
# EXPORT TOOLS
# =============================================================================
@mcp.tool()
async def phonebook_export(modem: str) -> str:
    """
    Export the modem's phonebook as vCard 3.0 text.

    Entries named like "Bob/h" and "Bob/m" are merged into one card. The
    result is cached; later calls return the same document.

    Args:
        modem: Configured modem name

    Returns:
        The vCard document, or error message
    """
    phonebook = await manager.get_phonebook(modem)
    if phonebook is None:
        return _no_phonebook(modem)
    try:
        return await phonebook.export()
    except PhonebookError as e:
        return _error(e)


# =============================================================================
# FDN TOOLS
# =============================================================================
@mcp.tool()
async def phonebook_export_fdn(modem: str) -> str:
    """
    List the SIM's FDN entries, one "index: name <number>" per line.

    Args:
        modem: Configured modem name

    Returns:
        Formatted FDN listing, or error message
    """
    phonebook = await manager.get_phonebook(modem)
    if phonebook is None:
        return _no_phonebook(modem)
    try:
        entries = await phonebook.export_fdn()
    except PhonebookError as e:
        return _error(e)

    header = f"📵 FDN entries on {modem}\n" + "─" * 40
    listing = "\n".join(f"{e.index}: {e.name} <{e.number}>" for e in entries)
    return f"{header}\n{listing or '(empty)'}"


@mcp.tool()
async def phonebook_insert_fdn(modem: str, name: str, number: str, pin2: str) -> str:
    """
    Add an FDN entry. Read the FDN entries first.

    Args:
        modem: Configured modem name
        name: Entry name
        number: Dialable number (digits, *, #, ',', ';', optional leading +)
        pin2: SIM PIN2

    Returns:
        Success message with the assigned index, or error message
    """
    phonebook = await manager.get_phonebook(modem)
    if phonebook is None:
        return _no_phonebook(modem)
    try:
        index = await phonebook.insert_fdn(name, number, pin2)
    except PhonebookError as e:
        return _error(e)
    return f"✅ Inserted FDN entry {index}: {name} <{number}>"


@mcp.tool()
async def phonebook_update_fdn(modem: str, name: str, number: str, pin2: str, fdn_index: int) -> str:
    """
    Rewrite an FDN entry. Read the FDN entries first.

    Args:
        modem: Configured modem name
        name: New entry name
        number: New dialable number
        pin2: SIM PIN2
        fdn_index: Index of the entry to rewrite

    Returns:
        Success or error message
    """
    phonebook = await manager.get_phonebook(modem)
    if phonebook is None:
        return _no_phonebook(modem)
    try:
        await phonebook.update_fdn(name, number, pin2, fdn_index)
    except PhonebookError as e:
        return _error(e)
    return f"✅ Updated FDN entry {fdn_index}: {name} <{number}>"


@mcp.tool()
async def phonebook_delete_fdn(modem: str, pin2: str, fdn_index: int) -> str:
    """
    Delete an FDN entry. Read the FDN entries first.

    Args:
        modem: Configured modem name
        pin2: SIM PIN2
        fdn_index: Index of the entry to delete

    Returns:
        Success or error message
    """
    phonebook = await manager.get_phonebook(modem)
    if phonebook is None:
        return _no_phonebook(modem)
    try:
        await phonebook.delete_fdn(pin2, fdn_index)
    except PhonebookError as e:
        return _error(e)
    return f"✅ Deleted FDN entry {fdn_index}"


# =============================================================================
# MODEM TOOLS
# =============================================================================
@mcp.tool()
def phonebook_add_modem(
    name: str,
    driver: str,
    vendor: int = 0,
    storages: Optional[List[str]] = None,
    config: Optional[Dict[str, Any]] = None
) -> str:
    """
    Add a modem configuration.

    Args:
        name: Modem name used by the other tools
        driver: Registered driver name (e.g., "simulated")
        vendor: Vendor quirk id passed to the driver (default: 0)
        storages: Storages to export in order (default: SM, ME)
        config: Driver-specific settings

    Returns:
        Success or error message
    """
    return manager.add_modem(name, driver, vendor, storages, config)


@mcp.tool()
async def phonebook_remove_modem(name: str) -> str:
    """
    Remove a modem configuration, dropping its cached phonebook.

    Args:
        name: Modem name

    Returns:
        Success or error message
    """
    return await manager.remove_modem(name)


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    mcp.run(transport="http", host=SERVER_HOST, port=SERVER_PORT)
