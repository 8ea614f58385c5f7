"""AMM client - drive a deployed constant-product AMM program on Solana.

This package provides two layers:
- `program`: address derivation, instruction encoding and the async client
- `config` / `cli`: environment-driven configuration and command line tools

Example:
    from amm_client import AmmClient, get_pool_addresses

    # Or import from specific modules
    from amm_client.program import build_swap_base_in_instruction
    from amm_client.config import Environment
"""

__version__ = "0.1.0"

# ============================================================================
# MODULE IMPORTS
# ============================================================================

from . import config
from . import program

# ============================================================================
# CONVENIENCE RE-EXPORTS FROM PROGRAM MODULE
# ============================================================================

from .program import (
    AmmClient,
    # Errors
    AccountNotFoundError,
    AmmClientError,
    ConfigurationError,
    ConfirmationTimeoutError,
    DerivationExhaustedError,
    InvalidSeedError,
    TransactionRejectedError,
    # PDA Functions
    derive_authority,
    derive_config,
    derive_for_market,
    find_program_address,
    get_pool_addresses,
    # Payload Encoders
    encode_deposit,
    encode_initialize2,
    encode_swap_base_in,
    # Instruction Builders
    build_deposit_instruction,
    build_initialize2_instruction,
    build_smoke_instruction,
    build_swap_base_in_instruction,
    # Types
    BaseSide,
    DepositParams,
    InitializePoolParams,
    MarketAccounts,
    PoolAddresses,
    SwapBaseInParams,
)
from .config import ClusterConfig, Environment

__all__ = [
    "__version__",
    # Submodules
    "config",
    "program",
    # Client
    "AmmClient",
    # Configuration
    "ClusterConfig",
    "Environment",
    # Errors
    "AccountNotFoundError",
    "AmmClientError",
    "ConfigurationError",
    "ConfirmationTimeoutError",
    "DerivationExhaustedError",
    "InvalidSeedError",
    "TransactionRejectedError",
    # PDA Functions
    "derive_authority",
    "derive_config",
    "derive_for_market",
    "find_program_address",
    "get_pool_addresses",
    # Payload Encoders
    "encode_deposit",
    "encode_initialize2",
    "encode_swap_base_in",
    # Instruction Builders
    "build_deposit_instruction",
    "build_initialize2_instruction",
    "build_smoke_instruction",
    "build_swap_base_in_instruction",
    # Types
    "BaseSide",
    "DepositParams",
    "InitializePoolParams",
    "MarketAccounts",
    "PoolAddresses",
    "SwapBaseInParams",
]
