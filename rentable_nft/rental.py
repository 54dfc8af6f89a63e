"""Time-bounded rental overlay on top of an ownership registry.

A holder rents a token out by handing possession to a renter while the overlay
records who is entitled to reclaim it. While the rental is active every
transfer of the token is vetoed, except the two transfers the overlay issues
itself. The renter may finish the rental at any time; once ``expires_at`` is
reached anyone may.
"""

import logging
from contextlib import contextmanager
from dataclasses import replace

from .basetypes import FinishedRent, Rental, Rented, checksummed
from .clock import Clock
from .errors import InvalidExpiration, NotOwner, NotRented, StillRented, TokenIsRented
from .events import EventLog
from .registry import TokenRegistry

logger = logging.getLogger(__name__)


class RentalOverlay:
    def __init__(self, registry: TokenRegistry, clock: Clock, events: EventLog, allow_rerent: bool = False):
        self.registry = registry
        self.clock = clock
        self.events = events
        self.allow_rerent = allow_rerent
        self._rentals: dict[int, Rental] = {}
        self._privileged_transfer: int | None = None

    def rental(self, token_id: int) -> Rental:
        return replace(self._rentals.get(token_id, Rental()))

    def is_rented(self, token_id: int) -> bool:
        return token_id in self._rentals and self._rentals[token_id].is_active

    def rent_out(self, renter: str, token_id: int, expires_at: int, sender: str) -> Rented:
        sender = checksummed(sender)
        renter = checksummed(renter)
        if not isinstance(expires_at, int) or isinstance(expires_at, bool):
            raise InvalidExpiration(f"RentableNFT: invalid expiration {expires_at!r}")

        if self.registry.owner_of(token_id) != sender:
            logger.info(f"rent_out rejected, {sender=} does not hold {token_id=}")
            raise NotOwner()
        if self.is_rented(token_id) and not self.allow_rerent:
            logger.info(f"rent_out rejected, {token_id=} is already rented")
            raise TokenIsRented()

        with self._privileged(token_id):
            self.registry.transfer(sender, renter, token_id)
        self._rentals[token_id] = Rental(nft_owner=sender, renter=renter, expires_at=expires_at, is_active=True)

        event = Rented(token_id, sender, renter, expires_at)
        logger.debug(f"rented {event=}")
        self.events.emit(event)
        return event

    def finish_renting(self, token_id: int, sender: str) -> FinishedRent:
        sender = checksummed(sender)
        if not self.is_rented(token_id):
            raise NotRented()

        rental = self._rentals[token_id]
        now = self.clock.now()
        if now < rental.expires_at and sender != rental.renter:
            logger.info(f"finish_renting rejected, {token_id=} rented until {rental.expires_at} ({now=})")
            raise StillRented()

        with self._privileged(token_id):
            self.registry.transfer(rental.renter, rental.nft_owner, token_id)
        rental.is_active = False

        event = FinishedRent(token_id, rental.nft_owner, rental.renter, rental.expires_at)
        logger.debug(f"finished rent {event=} {sender=}")
        self.events.emit(event)
        return event

    def check_transfer_allowed(self, token_id: int, sender: str, receiver: str):
        """Transfer guard: veto any transfer of an actively rented token not issued by this overlay."""
        if self.is_rented(token_id) and self._privileged_transfer != token_id:
            logger.info(f"transfer of rented {token_id=} from {sender} to {receiver} rejected")
            raise TokenIsRented()

    @contextmanager
    def _privileged(self, token_id: int):
        self._privileged_transfer = token_id
        try:
            yield
        finally:
            self._privileged_transfer = None

    def snapshot(self) -> dict[int, Rental]:
        return {token_id: replace(rental) for token_id, rental in self._rentals.items()}

    def restore(self, snapshot: dict[int, Rental]):
        self._rentals = {token_id: replace(rental) for token_id, rental in snapshot.items()}
