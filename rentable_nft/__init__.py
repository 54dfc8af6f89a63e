from .basetypes import ZERO_ADDRESS, FinishedRent, Rental, Rented, Transfer
from .clock import ManualClock, SystemClock
from .config import Environment, RentingConfig, load_config
from .errors import (
    InvalidExpiration,
    NotApproved,
    NotOwner,
    NotRented,
    RentingError,
    StillRented,
    TokenDoesNotExist,
    TokenIsRented,
)
from .events import EventLog
from .registry import OwnershipRegistry, TokenRegistry
from .rental import RentalOverlay
from .token import RentableNFT

__all__ = [
    "ZERO_ADDRESS",
    "Environment",
    "EventLog",
    "FinishedRent",
    "InvalidExpiration",
    "ManualClock",
    "NotApproved",
    "NotOwner",
    "NotRented",
    "OwnershipRegistry",
    "Rental",
    "RentalOverlay",
    "RentableNFT",
    "Rented",
    "RentingConfig",
    "RentingError",
    "StillRented",
    "SystemClock",
    "TokenDoesNotExist",
    "TokenIsRented",
    "TokenRegistry",
    "Transfer",
    "load_config",
]
