"""In-memory ERC-721 style ownership registry.

The registry owns token ids and their holders. It knows nothing about rentals:
other components veto transfers by registering transfer guards, which run
before any holder change is committed.
"""

import logging
from typing import Callable, Protocol

from .basetypes import ZERO_ADDRESS, Approval, ApprovalForAll, Transfer, checksummed
from .errors import (
    InvalidAddress,
    InvalidReceiver,
    NotApproved,
    NotOwner,
    TokenAlreadyMinted,
    TokenDoesNotExist,
)
from .events import EventLog

logger = logging.getLogger(__name__)

TransferGuard = Callable[[int, str, str], None]


class TokenRegistry(Protocol):
    """Capabilities the rental overlay needs from an ownership registry."""

    def owner_of(self, token_id: int) -> str:
        ...

    def transfer(self, sender: str, receiver: str, token_id: int):
        ...

    def total_supply(self) -> int:
        ...

    def balance_of(self, owner: str) -> int:
        ...


class OwnershipRegistry:
    def __init__(self, events: EventLog | None = None):
        self.events = events if events is not None else EventLog()
        self._owners: dict[int, str] = {}
        self._balances: dict[str, int] = {}
        self._token_approvals: dict[int, str] = {}
        self._operator_approvals: dict[tuple[str, str], bool] = {}
        self._next_token_id = 0
        self._guards: list[TransferGuard] = []

    def add_transfer_guard(self, guard: TransferGuard):
        self._guards.append(guard)

    # views

    def total_supply(self) -> int:
        return len(self._owners)

    def balance_of(self, owner: str) -> int:
        owner = checksummed(owner)
        if owner == ZERO_ADDRESS:
            raise InvalidAddress()
        return self._balances.get(owner, 0)

    def owner_of(self, token_id: int) -> str:
        if token_id not in self._owners:
            raise TokenDoesNotExist()
        return self._owners[token_id]

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def get_approved(self, token_id: int) -> str:
        self.owner_of(token_id)
        return self._token_approvals.get(token_id, ZERO_ADDRESS)

    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return self._operator_approvals.get((checksummed(owner), checksummed(operator)), False)

    def is_approved_or_owner(self, spender: str, token_id: int) -> bool:
        owner = self.owner_of(token_id)
        spender = checksummed(spender)
        return (
            spender == owner
            or self.is_approved_for_all(owner, spender)
            or self._token_approvals.get(token_id) == spender
        )

    # approvals

    def approve(self, approved: str, token_id: int, sender: str):
        owner = self.owner_of(token_id)
        approved = checksummed(approved)
        sender = checksummed(sender)
        if approved == owner:
            raise NotApproved("ERC721: approval to current owner")
        if sender != owner and not self.is_approved_for_all(owner, sender):
            raise NotApproved("ERC721: approve caller is not token owner or approved for all")
        self._token_approvals[token_id] = approved
        self.events.emit(Approval(owner, approved, token_id))

    def set_approval_for_all(self, operator: str, approved: bool, sender: str):
        operator = checksummed(operator)
        sender = checksummed(sender)
        if operator == sender:
            raise NotApproved("ERC721: approve to caller")
        self._operator_approvals[(sender, operator)] = approved
        self.events.emit(ApprovalForAll(sender, operator, approved))

    # supply

    def safe_mint(self, to: str) -> int:
        token_id = self._next_token_id
        self.mint(to, token_id)
        return token_id

    def mint(self, to: str, token_id: int):
        to = checksummed(to)
        if to == ZERO_ADDRESS:
            raise InvalidReceiver("ERC721: mint to the zero address")
        if token_id in self._owners:
            raise TokenAlreadyMinted()
        self._run_guards(token_id, ZERO_ADDRESS, to)

        self._owners[token_id] = to
        self._balances[to] = self._balances.get(to, 0) + 1
        self._next_token_id = max(self._next_token_id, token_id + 1)
        logger.debug(f"mint {token_id=} {to=}")
        self.events.emit(Transfer(ZERO_ADDRESS, to, token_id))

    def burn(self, token_id: int, sender: str):
        owner = self.owner_of(token_id)
        if not self.is_approved_or_owner(sender, token_id):
            raise NotApproved()
        self._run_guards(token_id, owner, ZERO_ADDRESS)

        del self._owners[token_id]
        self._token_approvals.pop(token_id, None)
        self._balances[owner] -= 1
        logger.debug(f"burn {token_id=} {owner=}")
        self.events.emit(Transfer(owner, ZERO_ADDRESS, token_id))

    # transfers

    def transfer_from(self, sender: str, receiver: str, token_id: int, caller: str):
        # guards veto before the caller check, so a locked token reports why it is locked
        self.owner_of(token_id)
        self._run_guards(token_id, checksummed(sender), checksummed(receiver))
        if not self.is_approved_or_owner(caller, token_id):
            raise NotApproved()
        self.transfer(sender, receiver, token_id)

    def transfer(self, sender: str, receiver: str, token_id: int):
        """Move ``token_id`` from ``sender`` to ``receiver`` without any caller checks.

        Fails with NotOwner if ``sender`` is not the current holder. Transfer
        guards run before the holder mapping changes, so a guard that raises
        leaves the registry untouched.
        """
        sender = checksummed(sender)
        receiver = checksummed(receiver)
        if self.owner_of(token_id) != sender:
            raise NotOwner()
        if receiver == ZERO_ADDRESS:
            raise InvalidReceiver()
        self._run_guards(token_id, sender, receiver)

        self._token_approvals.pop(token_id, None)
        self._balances[sender] -= 1
        self._balances[receiver] = self._balances.get(receiver, 0) + 1
        self._owners[token_id] = receiver
        logger.debug(f"transfer {token_id=} {sender=} {receiver=}")
        self.events.emit(Transfer(sender, receiver, token_id))

    def _run_guards(self, token_id: int, sender: str, receiver: str):
        for guard in self._guards:
            guard(token_id, sender, receiver)

    # state

    def snapshot(self) -> tuple:
        return (
            dict(self._owners),
            dict(self._balances),
            dict(self._token_approvals),
            dict(self._operator_approvals),
            self._next_token_id,
        )

    def restore(self, snapshot: tuple):
        owners, balances, token_approvals, operator_approvals, next_token_id = snapshot
        self._owners = dict(owners)
        self._balances = dict(balances)
        self._token_approvals = dict(token_approvals)
        self._operator_approvals = dict(operator_approvals)
        self._next_token_id = next_token_id
