from dataclasses import dataclass

from eth_utils import is_address, to_checksum_address

from .errors import InvalidAddress

ZERO_ADDRESS = "0x" + "00" * 20


def checksummed(address: str) -> str:
    if not isinstance(address, str) or not is_address(address):
        raise InvalidAddress(f"invalid address {address!r}")
    return to_checksum_address(address)


@dataclass
class Rental:
    nft_owner: str = ZERO_ADDRESS
    renter: str = ZERO_ADDRESS
    expires_at: int = 0
    is_active: bool = False

    def to_tuple(self):
        return (self.nft_owner, self.renter, self.expires_at, self.is_active)


@dataclass(frozen=True)
class Transfer:
    sender: str
    receiver: str
    token_id: int


@dataclass(frozen=True)
class Approval:
    owner: str
    approved: str
    token_id: int


@dataclass(frozen=True)
class ApprovalForAll:
    owner: str
    operator: str
    approved: bool


@dataclass(frozen=True)
class Rented:
    token_id: int
    nft_owner: str
    renter: str
    expires_at: int


@dataclass(frozen=True)
class FinishedRent:
    token_id: int
    nft_owner: str
    renter: str
    expires_at: int
