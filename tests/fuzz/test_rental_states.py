import hypothesis.strategies as st
from eth_account import Account
from hypothesis import Phase, settings
from hypothesis.stateful import (
    Bundle,
    RuleBasedStateMachine,
    consumes,
    initialize,
    invariant,
    multiple,
    rule,
    run_state_machine_as_test,
)

from rentable_nft import ManualClock, RentableNFT, RentingConfig
from rentable_nft.basetypes import FinishedRent, Rental, Rented
from rentable_nft.errors import NotOwner, NotRented, StillRented, TokenIsRented

from ..conftest_base import reverts

START_TIME = 1_700_000_000


class StateMachine(RuleBasedStateMachine):
    owners = [Account.create().address for _ in range(3)]
    renters = [Account.create().address for _ in range(3)]
    wallets = owners + renters
    tokens_not_rented = Bundle("tokens_not_rented")
    tokens_rented = Bundle("tokens_rented")

    @initialize(target=tokens_not_rented)
    def setup(self):
        self.clock = ManualClock(START_TIME)
        self.token = RentableNFT(RentingConfig(), self.clock)
        self.holder_of = {}
        self.rentals = {}

        token_count = 10
        for token_id in range(token_count):
            owner = self.owners[token_id % len(self.owners)]
            assert self.token.safe_mint(owner) == token_id
            self.holder_of[token_id] = owner

        return multiple(*range(token_count))

    @rule(hours=st.integers(min_value=1, max_value=48))
    def time_passing(self, hours):
        self.clock.time_travel(seconds=hours * 3600)

    @rule(token=tokens_not_rented, new_holder=st.sampled_from(wallets))
    def token_transfer(self, token, new_holder):
        holder = self.holder_of[token]
        if new_holder == holder:
            return
        self.token.transfer_from(holder, new_holder, token, sender=holder)
        self.holder_of[token] = new_holder

    @rule(token=tokens_rented, new_holder=st.sampled_from(wallets))
    def token_transfer_while_rented(self, token, new_holder):
        renter = self.holder_of[token]
        with reverts(error=TokenIsRented):
            self.token.transfer_from(renter, new_holder, token, sender=renter)

    @rule(token=tokens_not_rented, caller=st.sampled_from(wallets), renter=st.sampled_from(renters))
    def rent_out_by_non_holder(self, token, caller, renter):
        if caller == self.holder_of[token]:
            return
        with reverts(error=NotOwner):
            self.token.rent_out(renter, token, self.clock.now() + 3600, sender=caller)

    @rule(
        target=tokens_rented,
        token=consumes(tokens_not_rented),
        renter=st.sampled_from(renters),
        hours=st.integers(min_value=-2, max_value=48),
    )
    def rent_out(self, token, renter, hours):
        holder = self.holder_of[token]
        expires_at = self.clock.now() + hours * 3600

        event = self.token.rent_out(renter, token, expires_at, sender=holder)

        assert event == Rented(token, holder, renter, expires_at)
        self.rentals[token] = Rental(holder, renter, expires_at, True)
        self.holder_of[token] = renter
        return token

    @rule(token=tokens_rented, caller=st.sampled_from(wallets))
    def rent_out_while_rented(self, token, caller):
        expected = TokenIsRented if caller == self.holder_of[token] else NotOwner
        with reverts(error=expected):
            self.token.rent_out(caller, token, self.clock.now() + 3600, sender=caller)

    @rule(target=tokens_not_rented, token=consumes(tokens_rented))
    def finish_renting_by_renter(self, token):
        rental = self.rentals[token]

        event = self.token.finish_renting(token, sender=rental.renter)

        assert event == FinishedRent(token, rental.nft_owner, rental.renter, rental.expires_at)
        rental.is_active = False
        self.holder_of[token] = rental.nft_owner
        return token

    @rule(target=tokens_not_rented, token=consumes(tokens_rented), caller=st.sampled_from(wallets))
    def finish_renting_after_expiration(self, token, caller):
        rental = self.rentals[token]
        self.clock.time_travel(timestamp=max(self.clock.now(), rental.expires_at))

        self.token.finish_renting(token, sender=caller)

        rental.is_active = False
        self.holder_of[token] = rental.nft_owner
        return token

    @rule(token=tokens_rented, caller=st.sampled_from(wallets))
    def finish_renting_early_by_other(self, token, caller):
        rental = self.rentals[token]
        if caller == rental.renter or self.clock.now() >= rental.expires_at:
            return
        with reverts(error=StillRented):
            self.token.finish_renting(token, sender=caller)

    @rule(token=tokens_not_rented, caller=st.sampled_from(wallets))
    def finish_renting_not_rented(self, token, caller):
        with reverts(error=NotRented):
            self.token.finish_renting(token, sender=caller)

    @rule(token=tokens_rented)
    def nft_owner_cannot_take_back(self, token):
        rental = self.rentals[token]
        with reverts(error=TokenIsRented):
            self.token.transfer_from(rental.renter, rental.nft_owner, token, sender=rental.nft_owner)

    @invariant()
    def check_holders(self):
        for token, holder in self.holder_of.items():
            assert self.token.owner_of(token) == holder

    @invariant()
    def check_rentals(self):
        for token in self.holder_of:
            rental = self.token.rental(token)
            assert rental == self.rentals.get(token, Rental())
            if rental.is_active:
                assert self.token.owner_of(token) == rental.renter

    @invariant()
    def check_balances(self):
        assert self.token.total_supply() == len(self.holder_of)
        for wallet in self.wallets:
            assert self.token.balance_of(wallet) == sum(1 for h in self.holder_of.values() if h == wallet)


def test_rental_states():
    StateMachine.TestCase.settings = settings(
        phases=(Phase.explicit, Phase.reuse, Phase.generate, Phase.target),
        deadline=None,
        max_examples=50,
    )
    run_state_machine_as_test(StateMachine)
