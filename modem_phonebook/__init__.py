"""
Modem Phonebook

Exports a modem's contact storages as vCard 3.0 text, merging entries that
belong to one person, and manages the SIM's FDN file.

Layout follows the service pattern:
- interface.py: driver ABC + dataclasses
- manager.py: modem configs, driver registry, phonebook instances
- adapters/: driver implementations
"""

from .errors import (
    PhonebookError, PhonebookBusy, PhonebookNotImplemented, PhonebookNotReady,
    PhonebookInvalidFormat, PhonebookFailed
)
from .interface import (
    Category, RawEntry, NumberEntry, PersonRecord, FdnEntry, ModemConfig, PhonebookDriver
)
from .manager import PhonebookManager
from .phonebook import Phonebook, ExportState

__all__ = [
    "PhonebookError", "PhonebookBusy", "PhonebookNotImplemented", "PhonebookNotReady",
    "PhonebookInvalidFormat", "PhonebookFailed",
    "Category", "RawEntry", "NumberEntry", "PersonRecord", "FdnEntry", "ModemConfig",
    "PhonebookDriver", "PhonebookManager", "Phonebook", "ExportState",
]
