from __future__ import annotations

from typing import Any, List


class SettlementError(Exception):
    """Base class for settlement and tax calculation failures."""


class InvalidInputError(SettlementError, ValueError):
    """A price or quantity that cannot enter a calculation."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class InventoryMismatchError(SettlementError):
    """Raised in strict mode when counted quantities do not add up."""

    def __init__(self, mismatches: List[Any]) -> None:
        self.mismatches = list(mismatches)
        products = ", ".join(m.product_id for m in self.mismatches)
        super().__init__(
            f"{len(self.mismatches)} inventory line(s) where initial != sold + remaining: {products}"
        )


class ClearanceNotFoundError(SettlementError, LookupError):
    def __init__(self, clearance_id: str) -> None:
        self.clearance_id = clearance_id
        super().__init__(f"Clearance not found: {clearance_id}")


class SettlementAlreadyApprovedError(SettlementError):
    """Approved settlements are immutable; corrections need a new clearance cycle."""

    def __init__(self, clearance_id: str, status: str) -> None:
        self.clearance_id = clearance_id
        self.status = status
        super().__init__(
            f"Settlement for clearance {clearance_id} is already approved (status: {status})"
        )
