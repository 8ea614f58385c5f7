"""Pytest configuration and shared fixtures."""

import json
import os

import pytest
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from amm_client.config import Environment


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (run offline)")
    config.addinivalue_line("markers", "devnet: Integration tests against devnet")


def pytest_collection_modifyitems(config, items):
    """Skip devnet tests unless explicitly requested."""
    keyword = config.getoption("-k", default="") or ""
    run_devnet = "devnet" in keyword

    for item in items:
        if "test_devnet" in str(item.fspath):
            if not run_devnet and "DEVNET_TESTS" not in os.environ:
                item.add_marker(
                    pytest.mark.skip(
                        reason="Devnet tests skipped by default. Set DEVNET_TESTS=1 or use -k devnet"
                    )
                )


@pytest.fixture
def program_id():
    return Pubkey.new_unique()


@pytest.fixture
def market():
    return Pubkey.new_unique()


@pytest.fixture
def keypair_file(tmp_path):
    """Write a fresh keypair as a JSON byte array and return (path, keypair)."""
    keypair = Keypair()
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))))
    return path, keypair


@pytest.fixture
def pool_env(program_id, market):
    """An environment with every name the pool operations require."""
    return Environment(
        {
            "RAYDIUM_AMM_PROGRAM_ID": str(program_id),
            "MARKET_ADDRESS": str(market),
            "COIN_MINT": str(Pubkey.new_unique()),
            "PC_MINT": str(Pubkey.new_unique()),
            "USER_COIN_ACCOUNT": str(Pubkey.new_unique()),
            "USER_PC_ACCOUNT": str(Pubkey.new_unique()),
            "MARKET_EVENT_Q": str(Pubkey.new_unique()),
            "MARKET_BIDS": str(Pubkey.new_unique()),
            "MARKET_ASKS": str(Pubkey.new_unique()),
            "MARKET_COIN_VAULT": str(Pubkey.new_unique()),
            "MARKET_PC_VAULT": str(Pubkey.new_unique()),
            "MARKET_VAULT_SIGNER": str(Pubkey.new_unique()),
            "SWAP_SOURCE_ATA": str(Pubkey.new_unique()),
            "SWAP_DEST_ATA": str(Pubkey.new_unique()),
        }
    )
