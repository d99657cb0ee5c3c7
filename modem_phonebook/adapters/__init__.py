"""
Phonebook drivers shipped with the service.
"""

from .simulated import SimulatedPhonebookDriver

# Registry of built-in drivers
DRIVERS = {
    "simulated": SimulatedPhonebookDriver,
}

__all__ = ["DRIVERS", "SimulatedPhonebookDriver"]
