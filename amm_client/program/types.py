"""Type definitions for the AMM program module."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from solders.pubkey import Pubkey

from .constants import (
    CREATE_POOL_FEE_DESTINATION,
    OPENBOOK_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)


class BaseSide(IntEnum):
    """Which side of the pool a deposit's max amount is denominated in."""

    COIN = 0  # max_coin_amount is fixed, pc side is computed
    PC = 1  # max_pc_amount is fixed, coin side is computed


@dataclass(frozen=True)
class PoolAddresses:
    """Every program-derived account of a pool for one market."""

    authority: Pubkey
    nonce: int
    amm_pool: Pubkey
    open_orders: Pubkey
    target_orders: Pubkey
    lp_mint: Pubkey
    coin_vault: Pubkey
    pc_vault: Pubkey
    config: Pubkey

    def as_env(self) -> dict[str, str]:
        """Render as ``.env`` style names."""
        return {
            "AMM_POOL": str(self.amm_pool),
            "AMM_AUTHORITY": str(self.authority),
            "AMM_OPEN_ORDERS": str(self.open_orders),
            "AMM_LP_MINT": str(self.lp_mint),
            "AMM_COIN_VAULT": str(self.coin_vault),
            "AMM_PC_VAULT": str(self.pc_vault),
            "AMM_TARGET_ORDERS": str(self.target_orders),
            "AMM_CONFIG": str(self.config),
        }


@dataclass
class MarketAccounts:
    """OpenBook market sub-accounts referenced by a swap."""

    bids: Pubkey
    asks: Pubkey
    event_queue: Pubkey
    coin_vault: Pubkey
    pc_vault: Pubkey
    vault_signer: Pubkey


# Parameter types for instruction builders


@dataclass
class InitializePoolParams:
    """Parameters for the initialize2 instruction."""

    payer: Pubkey
    market: Pubkey
    coin_mint: Pubkey
    pc_mint: Pubkey
    user_coin: Pubkey
    user_pc: Pubkey
    init_coin_amount: int
    init_pc_amount: int
    open_time: int
    openbook_program_id: Pubkey = OPENBOOK_PROGRAM_ID
    create_fee_destination: Pubkey = CREATE_POOL_FEE_DESTINATION
    token_program_id: Pubkey = TOKEN_PROGRAM_ID


@dataclass
class DepositParams:
    """Parameters for the deposit instruction.

    ``other_amount_min`` selects the wire layout: None encodes the 25-byte
    form, any integer appends the trailing field (33 bytes).
    """

    owner: Pubkey
    market: Pubkey
    market_event_queue: Pubkey
    user_coin: Pubkey
    user_pc: Pubkey
    max_coin_amount: int
    max_pc_amount: int
    base_side: BaseSide = BaseSide.COIN
    other_amount_min: Optional[int] = None
    token_program_id: Pubkey = TOKEN_PROGRAM_ID


@dataclass
class SwapBaseInParams:
    """Parameters for the swap_base_in instruction."""

    owner: Pubkey
    market: Pubkey
    market_accounts: MarketAccounts
    user_source: Pubkey
    user_destination: Pubkey
    amount_in: int
    minimum_amount_out: int
    openbook_program_id: Pubkey = OPENBOOK_PROGRAM_ID
    token_program_id: Pubkey = TOKEN_PROGRAM_ID


# Results of setup helpers


@dataclass
class CreatedMint:
    """A freshly created mint and the payer's token account for it."""

    mint: Pubkey
    ata: Pubkey
    token_program_id: Pubkey
    transfer_hook_program_id: Optional[Pubkey] = None

    @property
    def has_transfer_hook(self) -> bool:
        return self.transfer_hook_program_id is not None


@dataclass
class CreatedMarket:
    """Accounts allocated for an (uninitialized) OpenBook market."""

    market: Pubkey
    event_queue: Pubkey
    request_queue: Pubkey
    bids: Pubkey
    asks: Pubkey
    coin_vault: Pubkey
    pc_vault: Pubkey
    vault_signer: Pubkey

    def as_env(self) -> dict[str, str]:
        """Render as ``.env`` style names."""
        return {
            "MARKET_ADDRESS": str(self.market),
            "MARKET_EVENT_Q": str(self.event_queue),
            "MARKET_REQUEST_Q": str(self.request_queue),
            "MARKET_BIDS": str(self.bids),
            "MARKET_ASKS": str(self.asks),
            "MARKET_COIN_VAULT": str(self.coin_vault),
            "MARKET_PC_VAULT": str(self.pc_vault),
            "MARKET_VAULT_SIGNER": str(self.vault_signer),
        }
