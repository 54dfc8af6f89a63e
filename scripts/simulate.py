import logging
import warnings

import click
from eth_account import Account

from rentable_nft import ManualClock, RentableNFT, load_config
from rentable_nft.config import current_environment

logger = logging.getLogger(__name__)
logger.setLevel(logging.WARNING)
warnings.filterwarnings("ignore")


@click.command()
@click.option("--tokens", default=3, show_default=True, help="Tokens minted to the owner")
@click.option("--token-id", default=1, show_default=True, help="Token to rent out")
@click.option("--duration", default=86400, show_default=True, help="Rental duration in seconds")
@click.option("--expire/--early", default=False, help="Finish after expiry by a third party instead of early by the renter")
@click.option("--config-dir", type=click.Path(file_okay=False), default=None, help="Directory holding <env>/renting.json")
def cli(tokens, token_id, duration, expire, config_dir):
    env = current_environment()
    config = load_config(env, config_dir)
    clock = ManualClock()
    token = RentableNFT(config, clock)
    print(f"Simulating {token} in {env.name}")

    nft_owner, renter, guy = (Account.create().address for _ in range(3))
    for _ in range(tokens):
        token.safe_mint(nft_owner)

    expires_at = clock.now() + duration
    rented = token.rent_out(renter, token_id, expires_at, sender=nft_owner)
    print(f"## {rented}")
    print(f"balances owner={token.balance_of(nft_owner)} renter={token.balance_of(renter)}")

    if expire:
        clock.time_travel(timestamp=expires_at)
        finished = token.finish_renting(token_id, sender=guy)
    else:
        finished = token.finish_renting(token_id, sender=renter)
    print(f"## {finished}")
    print(f"balances owner={token.balance_of(nft_owner)} renter={token.balance_of(renter)}")
    print(f"rental {token.rental(token_id)}")

    print("Done")
    return 0


if __name__ == "__main__":
    cli()
