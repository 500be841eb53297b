"""Domain models and services."""

from .accounts import Account, AccountStore
from .cooldowns import CooldownRecord, CooldownTracker
from .economy import EconomyEngine
from .exceptions import FishForgeError, InsufficientFunds, ItemNotFound
from .items import DEFAULT_ITEMS, Item, ItemCatalog
from .locks import UserLocks
from .pricing import CurrentPricePolicy, PurchasePricePolicy, SellPricePolicy
from .results import (
    BalanceInfo,
    DailyReward,
    Err,
    ErrorKind,
    InventoryView,
    Ok,
    Purchase,
    Result,
    Sale,
)

__all__ = [
    "Account",
    "AccountStore",
    "CooldownRecord",
    "CooldownTracker",
    "EconomyEngine",
    "FishForgeError",
    "InsufficientFunds",
    "ItemNotFound",
    "DEFAULT_ITEMS",
    "Item",
    "ItemCatalog",
    "UserLocks",
    "CurrentPricePolicy",
    "PurchasePricePolicy",
    "SellPricePolicy",
    "BalanceInfo",
    "DailyReward",
    "Err",
    "ErrorKind",
    "InventoryView",
    "Ok",
    "Purchase",
    "Result",
    "Sale",
]
