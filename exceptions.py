"""Typed exceptions for the collection engine.

Every error carries a machine-readable ``code`` so callers can branch on
type rather than on message text:

    RentLedgerError
    |
    +-- ValidationError      (input rejected before any persistence call)
    +-- LeaseNotFoundError   (a transaction referenced an unknown lease)
    +-- ConcurrentModificationError (a guarded update lost a race)
"""

from typing import Optional


class RentLedgerError(Exception):
    """Base class for all engine errors."""

    code: str = "RENTLEDGER_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(RentLedgerError, ValueError):
    """Input failed validation; nothing was written."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid input")


class LeaseNotFoundError(RentLedgerError):
    """The referenced lease does not exist."""

    code: str = "LEASE_NOT_FOUND"

    def __init__(self, lease_id: Optional[int]):
        self.lease_id = lease_id
        super().__init__(f"Lease {lease_id} not found")


class ConcurrentModificationError(RentLedgerError):
    """A row changed between read and write; the caller should reload and retry."""

    code: str = "CONCURRENT_MODIFICATION"

    def __init__(self, entity: str, entity_id: Optional[int]):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} was modified concurrently")
