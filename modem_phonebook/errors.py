"""
Phonebook errors.

Each error carries the short ``code`` a caller sees in replies.
"""


class PhonebookError(Exception):
    """Base class for phonebook request errors."""
    code = "Failed"
    default_message = "Operation failed"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    def __str__(self):
        return f"{self.code}: {self.args[0]}"


class PhonebookBusy(PhonebookError):
    """Another request is outstanding on this phonebook."""
    code = "Busy"
    default_message = "Operation already in progress"


class PhonebookNotImplemented(PhonebookError):
    """The modem driver lacks the operation."""
    code = "NotImplemented"
    default_message = "Implementation not provided"


class PhonebookNotReady(PhonebookError):
    """FDN mutation before the FDN file has been read."""
    code = "NotReady"
    default_message = "Read the FDN entries first"


class PhonebookInvalidFormat(PhonebookError):
    """Number or PIN2 failed syntax validation."""
    code = "InvalidFormat"
    default_message = "Argument format is not recognized"


class PhonebookFailed(PhonebookError):
    """The modem reported a failure."""
    code = "Failed"
    default_message = "Operation failed"
