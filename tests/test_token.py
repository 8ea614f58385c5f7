"""Tests for token setup helpers."""

import pytest
from solders.pubkey import Pubkey

from amm_client.program import (
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    build_create_ata_instruction,
    build_create_mint_instructions,
    build_initialize_transfer_hook_instruction,
    get_mint_size,
)
from amm_client.program.utils import get_associated_token_address


class TestGetMintSize:
    def test_sizes(self):
        assert get_mint_size() == 82
        assert get_mint_size(with_transfer_hook=True) == 234


class TestTransferHookInstruction:
    def test_layout(self):
        mint = Pubkey.new_unique()
        authority = Pubkey.new_unique()
        hook = Pubkey.new_unique()

        ix = build_initialize_transfer_hook_instruction(mint, authority, hook)
        data = bytes(ix.data)

        assert ix.program_id == TOKEN_2022_PROGRAM_ID
        assert len(data) == 66
        assert data[:2] == bytes([36, 0])
        assert data[2:34] == bytes(authority)
        assert data[34:] == bytes(hook)
        assert len(ix.accounts) == 1
        assert ix.accounts[0].pubkey == mint
        assert ix.accounts[0].is_writable

    def test_missing_values_are_zeroed(self):
        ix = build_initialize_transfer_hook_instruction(Pubkey.new_unique(), None, None)

        assert bytes(ix.data)[2:] == bytes(64)


class TestCreateAtaInstruction:
    def test_returns_derived_address(self):
        payer = Pubkey.new_unique()
        mint = Pubkey.new_unique()

        ix, ata = build_create_ata_instruction(payer, payer, mint, TOKEN_2022_PROGRAM_ID)

        assert ata == get_associated_token_address(payer, mint, TOKEN_2022_PROGRAM_ID)
        assert ata in [meta.pubkey for meta in ix.accounts]


class TestCreateMintInstructions:
    def test_classic_mint(self):
        payer = Pubkey.new_unique()
        mint = Pubkey.new_unique()

        instructions, ata = build_create_mint_instructions(payer, mint, 6, 1_000_000)

        assert len(instructions) == 4
        assert instructions[1].program_id == TOKEN_PROGRAM_ID
        assert instructions[3].program_id == TOKEN_PROGRAM_ID
        assert ata == get_associated_token_address(payer, mint)
        # InitializeMint carries the rent sysvar
        assert bytes(instructions[1].data)[0] == 0
        assert len(instructions[1].accounts) == 2

    def test_token_2022_with_transfer_hook(self):
        payer = Pubkey.new_unique()
        mint = Pubkey.new_unique()
        hook = Pubkey.new_unique()

        instructions, _ = build_create_mint_instructions(
            payer,
            mint,
            6,
            1_000_000,
            token_program_id=TOKEN_2022_PROGRAM_ID,
            transfer_hook_program_id=hook,
        )

        assert len(instructions) == 5
        # Hook initialization must precede mint initialization
        assert bytes(instructions[1].data)[:2] == bytes([36, 0])
        assert instructions[2].program_id == TOKEN_2022_PROGRAM_ID

    def test_token_2022_uses_initialize_mint2(self):
        mint = Pubkey.new_unique()

        instructions, _ = build_create_mint_instructions(
            Pubkey.new_unique(), mint, 6, 1_000_000, token_program_id=TOKEN_2022_PROGRAM_ID
        )
        init = instructions[1]

        assert init.program_id == TOKEN_2022_PROGRAM_ID
        assert bytes(init.data)[0] == 20
        assert bytes(init.data)[1] == 6
        assert [meta.pubkey for meta in init.accounts] == [mint]

    def test_transfer_hook_requires_token_2022(self):
        with pytest.raises(ValueError, match="Token-2022"):
            build_create_mint_instructions(
                Pubkey.new_unique(),
                Pubkey.new_unique(),
                6,
                1_000_000,
                transfer_hook_program_id=Pubkey.new_unique(),
            )
