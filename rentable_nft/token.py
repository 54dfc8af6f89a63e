import functools
import logging
from contextlib import contextmanager

from .basetypes import FinishedRent, Rental, Rented
from .clock import Clock, SystemClock
from .config import RentingConfig
from .events import EventLog
from .registry import OwnershipRegistry
from .rental import RentalOverlay

logger = logging.getLogger(__name__)


def atomic(method):
    """Run a state-changing call all-or-nothing: any error restores the state seen on entry."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        snapshot = self._snapshot()
        try:
            with self.events.deferred():
                return method(self, *args, **kwargs)
        except Exception:
            self._restore(snapshot)
            raise

    return wrapper


class RentableNFT:
    """ERC-721 style token whose holders can rent tokens out for a limited time.

    State-changing calls take the calling address as the ``sender`` keyword.
    """

    def __init__(self, config: RentingConfig | None = None, clock: Clock | None = None):
        self.config = config if config is not None else RentingConfig()
        self.clock = clock if clock is not None else SystemClock()
        self.events = EventLog()
        self.registry = OwnershipRegistry(self.events)
        self.overlay = RentalOverlay(self.registry, self.clock, self.events, allow_rerent=self.config.allow_rerent)
        self.registry.add_transfer_guard(self.overlay.check_transfer_allowed)

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def symbol(self) -> str:
        return self.config.symbol

    # registry views

    def total_supply(self) -> int:
        return self.registry.total_supply()

    def balance_of(self, owner: str) -> int:
        return self.registry.balance_of(owner)

    def owner_of(self, token_id: int) -> str:
        return self.registry.owner_of(token_id)

    def get_approved(self, token_id: int) -> str:
        return self.registry.get_approved(token_id)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return self.registry.is_approved_for_all(owner, operator)

    # registry calls

    @atomic
    def safe_mint(self, to: str) -> int:
        return self.registry.safe_mint(to)

    @atomic
    def mint(self, to: str, token_id: int):
        self.registry.mint(to, token_id)

    @atomic
    def burn(self, token_id: int, *, sender: str):
        self.registry.burn(token_id, sender)

    @atomic
    def approve(self, approved: str, token_id: int, *, sender: str):
        self.registry.approve(approved, token_id, sender)

    @atomic
    def set_approval_for_all(self, operator: str, approved: bool, *, sender: str):
        self.registry.set_approval_for_all(operator, approved, sender)

    @atomic
    def transfer_from(self, owner: str, receiver: str, token_id: int, *, sender: str):
        self.registry.transfer_from(owner, receiver, token_id, sender)

    # rentals

    def rental(self, token_id: int) -> Rental:
        return self.overlay.rental(token_id)

    @atomic
    def rent_out(self, renter: str, token_id: int, expires_at: int, *, sender: str) -> Rented:
        return self.overlay.rent_out(renter, token_id, expires_at, sender)

    @atomic
    def finish_renting(self, token_id: int, *, sender: str) -> FinishedRent:
        return self.overlay.finish_renting(token_id, sender)

    # events

    def get_logs(self, name: str | None = None) -> list:
        return self.events.get_logs(name)

    def get_last_event(self, name: str | None = None):
        return self.events.get_last_event(name)

    # state

    @contextmanager
    def anchor(self):
        """Scratch scope: every change made inside the block is discarded on exit."""
        snapshot = self._snapshot()
        try:
            yield self
        finally:
            self._restore(snapshot)

    def _snapshot(self) -> tuple:
        return (self.registry.snapshot(), self.overlay.snapshot(), self.events.snapshot())

    def _restore(self, snapshot: tuple):
        registry_state, overlay_state, events_state = snapshot
        self.registry.restore(registry_state)
        self.overlay.restore(overlay_state)
        self.events.restore(events_state)
        logger.debug("state restored")

    def __repr__(self):
        return f"<RentableNFT {self.name} ({self.symbol}) supply={self.total_supply()}>"
