"""Exceptions raised by FishForge domain services."""


class FishForgeError(RuntimeError):
    """Base class for domain exceptions."""


class ItemNotFound(FishForgeError):
    """Raised when a catalog or inventory lookup misses."""

    def __init__(self, item_name: str, *, where: str = "catalog") -> None:
        super().__init__(f"Item '{item_name}' not found in {where}")
        self.item_name = item_name
        self.where = where


class InsufficientFunds(FishForgeError):
    """Raised when a debit would drive a balance below zero."""

    def __init__(self, required: int, available: int) -> None:
        super().__init__(f"Insufficient funds: have {available}, need {required}")
        self.required = required
        self.available = available
