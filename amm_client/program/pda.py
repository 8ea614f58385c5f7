"""PDA (Program Derived Address) derivation functions for the AMM program.

Every address here is re-derived by the remote program to validate the
accounts a caller submits, so the seed bytes and their order are part of
the wire contract.
"""

from typing import Sequence, Tuple

from solders.pubkey import Pubkey

from .constants import (
    MARKET_SEEDS,
    MAX_SEED_LEN,
    MAX_SEEDS,
    SEED_AMM_POOL,
    SEED_AUTHORITY,
    SEED_COIN_VAULT,
    SEED_CONFIG,
    SEED_LP_MINT,
    SEED_OPEN_ORDERS,
    SEED_PC_VAULT,
    SEED_TARGET_ORDERS,
    SEED_VAULT_SIGNER,
)
from .errors import DerivationExhaustedError, InvalidSeedError
from .types import PoolAddresses


def _validate_seeds(seeds: Sequence[bytes]) -> None:
    # One slot is reserved for the bump
    if len(seeds) >= MAX_SEEDS:
        raise InvalidSeedError(f"{len(seeds)} seeds given, at most {MAX_SEEDS - 1} allowed")
    for i, seed in enumerate(seeds):
        if len(seed) > MAX_SEED_LEN:
            raise InvalidSeedError(
                f"seed {i} is {len(seed)} bytes, at most {MAX_SEED_LEN} allowed"
            )


def find_program_address(seeds: Sequence[bytes], program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Find the canonical program address and bump for the given seeds.

    Bumps are tried from 255 down to 0 with ``Pubkey.create_program_address``;
    the first off-curve candidate wins. Produces the same result as
    ``Pubkey.find_program_address`` but reports exhaustion as an exception
    instead of aborting.

    Raises:
        InvalidSeedError: If there are too many seeds or one is too long
        DerivationExhaustedError: If no bump yields a valid address
    """
    seeds = [bytes(seed) for seed in seeds]
    _validate_seeds(seeds)

    for bump in range(255, -1, -1):
        try:
            return Pubkey.create_program_address([*seeds, bytes([bump])], program_id), bump
        except Exception:
            # solders raises its (unexported) PubkeyError for on-curve candidates
            continue

    raise DerivationExhaustedError(str(program_id))


def derive_authority(program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Derive the AMM authority PDA. Its bump is the pool nonce.

    Seeds: ["amm authority"]
    """
    return find_program_address([SEED_AUTHORITY.encode("utf-8")], program_id)


def derive_config(program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Derive the global AMM config PDA.

    Seeds: ["amm_config_account_seed"]
    """
    return find_program_address([SEED_CONFIG.encode("utf-8")], program_id)


def derive_for_market(
    program_id: Pubkey,
    market: Pubkey,
    seed_name: str,
) -> Tuple[Pubkey, int]:
    """Derive a per-market PDA for one pool role.

    Seeds: [program_id, market, seed_name]
    """
    return find_program_address(
        [bytes(program_id), bytes(market), seed_name.encode("utf-8")],
        program_id,
    )


def get_amm_pool_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_AMM_POOL)[0]


def get_open_orders_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_OPEN_ORDERS)[0]


def get_target_orders_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_TARGET_ORDERS)[0]


def get_lp_mint_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_LP_MINT)[0]


def get_coin_vault_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_COIN_VAULT)[0]


def get_pc_vault_address(program_id: Pubkey, market: Pubkey) -> Pubkey:
    return derive_for_market(program_id, market, SEED_PC_VAULT)[0]


def get_pool_addresses(program_id: Pubkey, market: Pubkey) -> PoolAddresses:
    """Derive all pool accounts for a market in one pass."""
    authority, nonce = derive_authority(program_id)
    config, _ = derive_config(program_id)
    per_market = {
        seed: derive_for_market(program_id, market, seed)[0] for seed in MARKET_SEEDS
    }
    return PoolAddresses(
        authority=authority,
        nonce=nonce,
        amm_pool=per_market[SEED_AMM_POOL],
        open_orders=per_market[SEED_OPEN_ORDERS],
        target_orders=per_market[SEED_TARGET_ORDERS],
        lp_mint=per_market[SEED_LP_MINT],
        coin_vault=per_market[SEED_COIN_VAULT],
        pc_vault=per_market[SEED_PC_VAULT],
        config=config,
    )


def get_vault_signer_address(openbook_program_id: Pubkey) -> Tuple[Pubkey, int]:
    """Derive the market vault signer used by the setup scripts.

    Seeds: ["vault_signer"], derived against the market program.
    """
    return find_program_address([SEED_VAULT_SIGNER], openbook_program_id)
