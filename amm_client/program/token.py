"""SPL Token / Token-2022 helpers used to set up test pools."""

from typing import List, Optional, Tuple

from solders.instruction import AccountMeta, Instruction
from solders.pubkey import Pubkey
from solders.system_program import CreateAccountParams, create_account
from spl.token.instructions import (
    InitializeMint2Params,
    InitializeMintParams,
    MintToParams,
    create_associated_token_account,
    initialize_mint,
    initialize_mint2,
    mint_to,
)

from .constants import (
    DEFAULT_MINT_SUPPLY,
    MINT_SIZE,
    MINT_WITH_TRANSFER_HOOK_SIZE,
    TOKEN_2022_INSTRUCTION_TRANSFER_HOOK,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    TRANSFER_HOOK_INITIALIZE,
)
from .utils import get_associated_token_address


def get_mint_size(with_transfer_hook: bool = False) -> int:
    """Account size for a mint, with or without the TransferHook extension."""
    return MINT_WITH_TRANSFER_HOOK_SIZE if with_transfer_hook else MINT_SIZE


def build_initialize_transfer_hook_instruction(
    mint: Pubkey,
    authority: Optional[Pubkey],
    hook_program_id: Optional[Pubkey],
) -> Instruction:
    """Build the Token-2022 TransferHook::Initialize instruction.

    Must precede mint initialization.

    Accounts:
    0. mint (writable)

    Data: [36, 0, authority (32, zeroed = none), hook_program_id (32, zeroed = none)]
    """
    data = bytearray()
    data.append(TOKEN_2022_INSTRUCTION_TRANSFER_HOOK)
    data.append(TRANSFER_HOOK_INITIALIZE)
    data.extend(bytes(authority) if authority is not None else bytes(32))
    data.extend(bytes(hook_program_id) if hook_program_id is not None else bytes(32))

    accounts = [AccountMeta(pubkey=mint, is_signer=False, is_writable=True)]

    return Instruction(
        program_id=TOKEN_2022_PROGRAM_ID, accounts=accounts, data=bytes(data)
    )


def build_create_ata_instruction(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Tuple[Instruction, Pubkey]:
    """Build an instruction creating the owner's associated token account.

    Returns the instruction and the ATA address.
    """
    ata = get_associated_token_address(owner, mint, token_program_id)
    ix = create_associated_token_account(
        payer=payer,
        owner=owner,
        mint=mint,
        token_program_id=token_program_id,
    )
    return ix, ata


def build_create_mint_instructions(
    payer: Pubkey,
    mint: Pubkey,
    decimals: int,
    lamports: int,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
    transfer_hook_program_id: Optional[Pubkey] = None,
    supply: int = DEFAULT_MINT_SUPPLY,
) -> Tuple[List[Instruction], Pubkey]:
    """Build the instructions that create a mint, the payer's ATA and an initial supply.

    The payer is mint authority; there is no freeze authority. Token-2022
    mints use InitializeMint2, classic mints InitializeMint. A transfer hook
    is only valid for Token-2022 mints.

    Returns the instructions (in order) and the payer's ATA address.
    """
    if transfer_hook_program_id is not None and token_program_id != TOKEN_2022_PROGRAM_ID:
        raise ValueError("Transfer hooks require the Token-2022 program")

    space = get_mint_size(with_transfer_hook=transfer_hook_program_id is not None)

    instructions = [
        create_account(
            CreateAccountParams(
                from_pubkey=payer,
                to_pubkey=mint,
                lamports=lamports,
                space=space,
                owner=token_program_id,
            )
        )
    ]

    if transfer_hook_program_id is not None:
        instructions.append(
            build_initialize_transfer_hook_instruction(mint, payer, transfer_hook_program_id)
        )

    if token_program_id == TOKEN_2022_PROGRAM_ID:
        # InitializeMint2 takes no rent sysvar account
        instructions.append(
            initialize_mint2(
                InitializeMint2Params(
                    decimals=decimals,
                    program_id=token_program_id,
                    mint=mint,
                    mint_authority=payer,
                    freeze_authority=None,
                )
            )
        )
    else:
        instructions.append(
            initialize_mint(
                InitializeMintParams(
                    decimals=decimals,
                    program_id=token_program_id,
                    mint=mint,
                    mint_authority=payer,
                    freeze_authority=None,
                )
            )
        )

    ata_ix, ata = build_create_ata_instruction(payer, payer, mint, token_program_id)
    instructions.append(ata_ix)

    instructions.append(
        mint_to(
            MintToParams(
                program_id=token_program_id,
                mint=mint,
                dest=ata,
                mint_authority=payer,
                amount=supply,
            )
        )
    )

    return instructions, ata
