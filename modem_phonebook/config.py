"""
Configuration constants for the modem phonebook service.

Import from here to avoid duplication across the manager, drivers and server.
"""

import os
from pathlib import Path

# Base paths
PHONEBOOK_ROOT = Path(os.getenv("PHONEBOOK_ROOT", "/data"))
CONFIG_DIR = PHONEBOOK_ROOT / "config"
MODEMS_CONFIG = CONFIG_DIR / "phonebook_modems.json"

# Storages enumerated on export: SIM memory, then handset memory
DEFAULT_STORAGES = ("SM", "ME")

# 3GPP TS 24.008 type-of-number values
TYPE_INTERNATIONAL = 145
TYPE_NATIONAL = 129

# vCard output
VCARD_LINE_WIDTH = 75
VCARD_LINE_END = "\r\n"

# FDN argument syntax
MAX_PHONE_NUMBER_LENGTH = 20
PIN2_MIN_LENGTH = 4
PIN2_MAX_LENGTH = 8

# Server
SERVER_HOST = os.getenv("PHONEBOOK_HOST", "0.0.0.0")
SERVER_PORT = int(os.getenv("PHONEBOOK_PORT", "8000"))
LOG_LEVEL = os.getenv("PHONEBOOK_LOG_LEVEL", "INFO")
