"""Errors raised by the registry and the rental overlay.

Every error carries a ``reason`` in the style of a contract revert message, so
callers can match on either the type or the text.
"""


class RentingError(Exception):
    """Base error for rejected calls."""

    reason = "call rejected"

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)


class RegistryError(RentingError):
    pass


class NotOwner(RegistryError):
    reason = "ERC721: transfer of token that is not own"


class NotApproved(RegistryError):
    reason = "ERC721: caller is not token owner or approved"


class TokenDoesNotExist(RegistryError):
    reason = "ERC721: invalid token ID"


class TokenAlreadyMinted(RegistryError):
    reason = "ERC721: token already minted"


class InvalidAddress(RegistryError):
    reason = "ERC721: address zero is not a valid owner"


class InvalidReceiver(RegistryError):
    reason = "ERC721: transfer to the zero address"


class RentalError(RentingError):
    pass


class TokenIsRented(RentalError):
    reason = "RentableNFT: this token is rented"


class NotRented(RentalError):
    reason = "RentableNFT: this token is not rented"


class StillRented(RentalError):
    reason = "RentableNFT: this token is rented"


class InvalidExpiration(RentalError):
    reason = "RentableNFT: expiration must be an integer timestamp"
