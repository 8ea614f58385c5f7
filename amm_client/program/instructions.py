"""Instruction builders for the AMM program.

Each remote operation has a pure payload encoder (``encode_*``) and a
builder (``build_*_instruction``) that pairs the payload with the
positional account list the program expects. Position, not name, binds
an account to its role, so the lists below must not be reordered.
"""

from typing import Optional

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey

from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    INSTRUCTION_DEPOSIT,
    INSTRUCTION_INITIALIZE2,
    INSTRUCTION_SWAP_BASE_IN,
    SYSTEM_PROGRAM_ID,
    SYSVAR_RENT_ID,
)
from .pda import get_pool_addresses
from .types import DepositParams, InitializePoolParams, SwapBaseInParams
from .utils import encode_u64, encode_u8, get_associated_token_address


# ============================================================================
# PAYLOAD ENCODERS
# ============================================================================


def encode_initialize2(
    nonce: int,
    open_time: int,
    init_pc_amount: int,
    init_coin_amount: int,
) -> bytes:
    """Encode initialize2 instruction data.

    Layout (26 bytes):
    - [0]: tag (1)
    - [1]: nonce (u8, low 8 bits of the authority bump)
    - [2..10]: open_time (u64 LE)
    - [10..18]: init_pc_amount (u64 LE)
    - [18..26]: init_coin_amount (u64 LE)
    """
    data = bytearray()
    data.append(INSTRUCTION_INITIALIZE2)
    data.extend(encode_u8(nonce & 0xFF))
    data.extend(encode_u64(open_time))
    data.extend(encode_u64(init_pc_amount))
    data.extend(encode_u64(init_coin_amount))
    return bytes(data)


def encode_deposit(
    max_coin_amount: int,
    max_pc_amount: int,
    base_side: int,
    other_amount_min: Optional[int] = None,
) -> bytes:
    """Encode deposit instruction data.

    Layout (25 bytes, or 33 with ``other_amount_min``):
    - [0]: tag (3)
    - [1..9]: max_coin_amount (u64 LE)
    - [9..17]: max_pc_amount (u64 LE)
    - [17..25]: base_side (u64 LE, 0 = coin, 1 = pc)
    - [25..33]: other_amount_min (u64 LE, optional)
    """
    data = bytearray()
    data.append(INSTRUCTION_DEPOSIT)
    data.extend(encode_u64(max_coin_amount))
    data.extend(encode_u64(max_pc_amount))
    data.extend(encode_u64(int(base_side)))
    if other_amount_min is not None:
        data.extend(encode_u64(other_amount_min))
    return bytes(data)


def encode_swap_base_in(amount_in: int, minimum_amount_out: int) -> bytes:
    """Encode swap_base_in instruction data.

    Layout (17 bytes): [9, amount_in (u64 LE), minimum_amount_out (u64 LE)]
    """
    data = bytearray()
    data.append(INSTRUCTION_SWAP_BASE_IN)
    data.extend(encode_u64(amount_in))
    data.extend(encode_u64(minimum_amount_out))
    return bytes(data)


# ============================================================================
# INSTRUCTION BUILDERS
# ============================================================================


def build_initialize2_instruction(
    params: InitializePoolParams,
    program_id: Pubkey,
) -> Instruction:
    """Build the initialize2 (create pool) instruction.

    Accounts:
    0. token_program
    1. associated_token_program
    2. system_program
    3. rent sysvar
    4. amm_pool (writable)
    5. authority
    6. open_orders (writable)
    7. lp_mint (writable)
    8. coin_mint
    9. pc_mint
    10. coin_vault (writable)
    11. pc_vault (writable)
    12. target_orders (writable)
    13. config
    14. create_fee_destination (writable)
    15. market_program
    16. market
    17. payer (signer, writable)
    18. user_coin
    19. user_pc
    20. user_lp (writable)

    Data: [1, nonce (u8), open_time (u64), init_pc (u64), init_coin (u64)]
    """
    pool = get_pool_addresses(program_id, params.market)
    user_lp = get_associated_token_address(params.payer, pool.lp_mint)

    accounts = [
        AccountMeta(pubkey=params.token_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=ASSOCIATED_TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSVAR_RENT_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.amm_pool, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.open_orders, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.lp_mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.coin_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.pc_mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.coin_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.pc_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.target_orders, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.config, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.create_fee_destination, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.openbook_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.market, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=params.user_coin, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.user_pc, is_signer=False, is_writable=False),
        AccountMeta(pubkey=user_lp, is_signer=False, is_writable=True),
    ]

    data = encode_initialize2(
        nonce=pool.nonce,
        open_time=params.open_time,
        init_pc_amount=params.init_pc_amount,
        init_coin_amount=params.init_coin_amount,
    )

    return Instruction(program_id=program_id, accounts=accounts, data=data)


def build_deposit_instruction(
    params: DepositParams,
    program_id: Pubkey,
) -> Instruction:
    """Build the deposit (add liquidity) instruction.

    Accounts:
    0. token_program
    1. amm_pool (writable)
    2. authority
    3. open_orders
    4. target_orders (writable)
    5. lp_mint (writable)
    6. coin_vault (writable)
    7. pc_vault (writable)
    8. market
    9. user_coin (writable)
    10. user_pc (writable)
    11. user_lp (writable)
    12. owner (signer)
    13. market_event_queue

    Data: [3, max_coin (u64), max_pc (u64), base_side (u64), other_amount_min (u64)?]
    """
    pool = get_pool_addresses(program_id, params.market)
    user_lp = get_associated_token_address(params.owner, pool.lp_mint)

    accounts = [
        AccountMeta(pubkey=params.token_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.amm_pool, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.open_orders, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.target_orders, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.lp_mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.coin_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.pc_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.market, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.user_coin, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.user_pc, is_signer=False, is_writable=True),
        AccountMeta(pubkey=user_lp, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.owner, is_signer=True, is_writable=False),
        AccountMeta(pubkey=params.market_event_queue, is_signer=False, is_writable=False),
    ]

    data = encode_deposit(
        max_coin_amount=params.max_coin_amount,
        max_pc_amount=params.max_pc_amount,
        base_side=params.base_side,
        other_amount_min=params.other_amount_min,
    )

    return Instruction(program_id=program_id, accounts=accounts, data=data)


def build_swap_base_in_instruction(
    params: SwapBaseInParams,
    program_id: Pubkey,
) -> Instruction:
    """Build the swap_base_in (exact input) instruction.

    Target orders is omitted; the program treats it as optional for swaps.

    Accounts:
    0. token_program
    1. amm_pool (writable)
    2. authority
    3. open_orders (writable)
    4. coin_vault (writable)
    5. pc_vault (writable)
    6. market_program
    7. market (writable)
    8. market_bids (writable)
    9. market_asks (writable)
    10. market_event_queue (writable)
    11. market_coin_vault (writable)
    12. market_pc_vault (writable)
    13. market_vault_signer
    14. user_source (writable)
    15. user_destination (writable)
    16. owner (signer)

    Data: [9, amount_in (u64), minimum_amount_out (u64)]
    """
    pool = get_pool_addresses(program_id, params.market)
    market_accounts = params.market_accounts

    accounts = [
        AccountMeta(pubkey=params.token_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.amm_pool, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.authority, is_signer=False, is_writable=False),
        AccountMeta(pubkey=pool.open_orders, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.coin_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=pool.pc_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.openbook_program_id, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.market, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.bids, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.asks, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.event_queue, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.coin_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.pc_vault, is_signer=False, is_writable=True),
        AccountMeta(pubkey=market_accounts.vault_signer, is_signer=False, is_writable=False),
        AccountMeta(pubkey=params.user_source, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.user_destination, is_signer=False, is_writable=True),
        AccountMeta(pubkey=params.owner, is_signer=True, is_writable=False),
    ]

    data = encode_swap_base_in(params.amount_in, params.minimum_amount_out)

    return Instruction(program_id=program_id, accounts=accounts, data=data)


def build_smoke_instruction(program_id: Pubkey) -> Instruction:
    """Build an instruction with no accounts and no data.

    The program is expected to reject it; a rejection proves it is deployed
    and reachable.
    """
    return Instruction(program_id=program_id, accounts=[], data=b"")
