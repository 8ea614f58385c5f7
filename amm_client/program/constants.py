"""Constants for the AMM program module."""

from solders.pubkey import Pubkey

# ============================================================================
# PROGRAM IDS
# ============================================================================

# OpenBook (Serum v3 fork) deployment the pool scripts were run against
OPENBOOK_PROGRAM_ID = Pubkey.from_string("EoTcMgcDRTJVZDMZWBoU6rhYHZfkNTVEAfz3uUJRcYGj")

# Receives the pool creation fee during initialize2
CREATE_POOL_FEE_DESTINATION = Pubkey.from_string(
    "9y8ENuuZ3b19quffx9hQvRVygG5ky6snHfRvGpuSfeJy"
)

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string(
    "ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL"
)
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")
SYSVAR_RENT_ID = Pubkey.from_string("SysvarRent111111111111111111111111111111111")

# ============================================================================
# PDA SEEDS
# ============================================================================

SEED_AUTHORITY = "amm authority"
SEED_AMM_POOL = "amm_associated_seed"
SEED_TARGET_ORDERS = "target_associated_seed"
SEED_OPEN_ORDERS = "open_order_associated_seed"
SEED_COIN_VAULT = "coin_vault_associated_seed"
SEED_PC_VAULT = "pc_vault_associated_seed"
SEED_LP_MINT = "lp_mint_associated_seed"
SEED_CONFIG = "amm_config_account_seed"

# Per-market roles (everything except authority and config)
MARKET_SEEDS = (
    SEED_AMM_POOL,
    SEED_TARGET_ORDERS,
    SEED_OPEN_ORDERS,
    SEED_COIN_VAULT,
    SEED_PC_VAULT,
    SEED_LP_MINT,
)

# OpenBook vault signer, derived against the market program
SEED_VAULT_SIGNER = b"vault_signer"

MAX_SEEDS = 16
MAX_SEED_LEN = 32

# ============================================================================
# INSTRUCTION TAGS
# ============================================================================

INSTRUCTION_INITIALIZE2 = 1
INSTRUCTION_DEPOSIT = 3
INSTRUCTION_SWAP_BASE_IN = 9

# Token-2022 TransferHookExtension / Initialize
TOKEN_2022_INSTRUCTION_TRANSFER_HOOK = 36
TRANSFER_HOOK_INITIALIZE = 0

# ============================================================================
# SIZES
# ============================================================================

MINT_SIZE = 82
# Base account padding (165) + account type (1) + TLV header (4) + authority and program id (64)
MINT_WITH_TRANSFER_HOOK_SIZE = 234

# Uninitialized OpenBook market layout used by the setup scripts
MARKET_ACCOUNT_SIZE = 388
EVENT_QUEUE_SIZE = 262144
REQUEST_QUEUE_SIZE = 5120
ORDERBOOK_SIZE = 65536

# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_RPC_URL = "https://api.devnet.solana.com"
DEFAULT_WALLET_PATH = "~/.config/solana/id.json"
DEFAULT_TOKEN_DECIMALS = 6
DEFAULT_MINT_SUPPLY = 1_000_000_000
LAMPORTS_PER_SOL = 1_000_000_000

# The remote program rejects pools whose open time is in the future
OPEN_TIME_OFFSET_SECS = 30

U64_MAX = 18446744073709551615
