"""On-chain program interaction module.

This module provides the address derivation, instruction encoding and
async client used to drive a deployed AMM program on Solana.
"""

from .client import AmmClient
from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    CREATE_POOL_FEE_DESTINATION,
    INSTRUCTION_DEPOSIT,
    INSTRUCTION_INITIALIZE2,
    INSTRUCTION_SWAP_BASE_IN,
    MARKET_SEEDS,
    OPENBOOK_PROGRAM_ID,
    SEED_AMM_POOL,
    SEED_AUTHORITY,
    SEED_COIN_VAULT,
    SEED_CONFIG,
    SEED_LP_MINT,
    SEED_OPEN_ORDERS,
    SEED_PC_VAULT,
    SEED_TARGET_ORDERS,
    SYSTEM_PROGRAM_ID,
    SYSVAR_RENT_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .errors import (
    AccountNotFoundError,
    AmmClientError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DerivationError,
    DerivationExhaustedError,
    InvalidSeedError,
    TransactionRejectedError,
)
from .instructions import (
    build_deposit_instruction,
    build_initialize2_instruction,
    build_smoke_instruction,
    build_swap_base_in_instruction,
    encode_deposit,
    encode_initialize2,
    encode_swap_base_in,
)
from .pda import (
    derive_authority,
    derive_config,
    derive_for_market,
    find_program_address,
    get_amm_pool_address,
    get_coin_vault_address,
    get_lp_mint_address,
    get_open_orders_address,
    get_pc_vault_address,
    get_pool_addresses,
    get_target_orders_address,
    get_vault_signer_address,
)
from .token import (
    build_create_ata_instruction,
    build_create_mint_instructions,
    build_initialize_transfer_hook_instruction,
    get_mint_size,
)
from .types import (
    BaseSide,
    CreatedMarket,
    CreatedMint,
    DepositParams,
    InitializePoolParams,
    MarketAccounts,
    PoolAddresses,
    SwapBaseInParams,
)

__all__ = [
    # Client
    "AmmClient",
    # Constants
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "CREATE_POOL_FEE_DESTINATION",
    "INSTRUCTION_DEPOSIT",
    "INSTRUCTION_INITIALIZE2",
    "INSTRUCTION_SWAP_BASE_IN",
    "MARKET_SEEDS",
    "OPENBOOK_PROGRAM_ID",
    "SEED_AMM_POOL",
    "SEED_AUTHORITY",
    "SEED_COIN_VAULT",
    "SEED_CONFIG",
    "SEED_LP_MINT",
    "SEED_OPEN_ORDERS",
    "SEED_PC_VAULT",
    "SEED_TARGET_ORDERS",
    "SYSTEM_PROGRAM_ID",
    "SYSVAR_RENT_ID",
    "TOKEN_2022_PROGRAM_ID",
    "TOKEN_PROGRAM_ID",
    # Errors
    "AmmClientError",
    "ConfigurationError",
    "DerivationError",
    "DerivationExhaustedError",
    "InvalidSeedError",
    "TransactionRejectedError",
    "ConfirmationTimeoutError",
    "AccountNotFoundError",
    # PDA Functions
    "find_program_address",
    "derive_authority",
    "derive_config",
    "derive_for_market",
    "get_amm_pool_address",
    "get_open_orders_address",
    "get_target_orders_address",
    "get_lp_mint_address",
    "get_coin_vault_address",
    "get_pc_vault_address",
    "get_pool_addresses",
    "get_vault_signer_address",
    # Payload Encoders
    "encode_initialize2",
    "encode_deposit",
    "encode_swap_base_in",
    # Instruction Builders
    "build_initialize2_instruction",
    "build_deposit_instruction",
    "build_swap_base_in_instruction",
    "build_smoke_instruction",
    # Token Helpers
    "build_create_ata_instruction",
    "build_create_mint_instructions",
    "build_initialize_transfer_hook_instruction",
    "get_mint_size",
    # Types
    "BaseSide",
    "PoolAddresses",
    "MarketAccounts",
    "InitializePoolParams",
    "DepositParams",
    "SwapBaseInParams",
    "CreatedMint",
    "CreatedMarket",
]
