"""Command line entry points for driving a deployed AMM program.

Each subcommand builds its configuration once from ``.env`` / the process
environment, loads the wallet, submits a single operation and prints the
resulting addresses as ``NAME=value`` lines.
"""

import argparse
import asyncio
import logging
import os
import sys
from typing import Mapping, Optional

from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException, RPCNoResultException
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .config import (
    ClusterConfig,
    Environment,
    MarketSetupConfig,
    TokenSetupConfig,
    load_amm_program_id,
    load_deposit_params,
    load_initialize_pool_params,
    load_swap_params,
)
from .program.client import AmmClient
from .program.constants import LAMPORTS_PER_SOL, TOKEN_PROGRAM_ID
from .program.errors import AmmClientError, ConfigurationError, TransactionRejectedError
from .program.pda import get_pool_addresses
from .program.types import DepositParams, InitializePoolParams, SwapBaseInParams
from .program.utils import get_associated_token_address

logger = logging.getLogger(__name__)


def _print_env(values: Mapping[str, str]) -> None:
    for name, value in values.items():
        print(f"{name}={value}")


async def _smoke(cluster: ClusterConfig, program_id: Pubkey, payer: Keypair) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, program_id, confirm_timeout=cluster.confirm_timeout)
        tx = await client.smoke(payer.pubkey())
        try:
            signature = await client.sign_and_send(tx, [payer])
        except TransactionRejectedError as e:
            print(f"program responded (expected error): {e.message}")
            return 0
    logger.warning(f"Empty instruction unexpectedly succeeded: {signature}")
    print(f"unexpected success {signature}")
    return 0


def _cmd_smoke(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    program_id = load_amm_program_id(env)
    payer = cluster.load_payer()
    return asyncio.run(_smoke(cluster, program_id, payer))


async def _airdrop(cluster: ClusterConfig, payer: Keypair, min_lamports: int) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, confirm_timeout=cluster.confirm_timeout)
        signature = await client.airdrop_if_needed(payer.pubkey(), min_lamports)
        balance = await client.get_balance(payer.pubkey())
    if signature is not None:
        print(f"Airdrop tx: {signature}")
    print(f"BALANCE={balance}")
    return 0


def _cmd_airdrop(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    payer = cluster.load_payer()
    min_lamports = int(args.min_sol * LAMPORTS_PER_SOL)
    return asyncio.run(_airdrop(cluster, payer, min_lamports))


async def _create_tokens(
    cluster: ClusterConfig,
    config: TokenSetupConfig,
    payer: Keypair,
    with_spl_wrappers: bool,
) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, confirm_timeout=cluster.confirm_timeout)
        coin = await client.create_mint(
            payer, config.decimals, config.token_program_id, config.transfer_hook_program_id
        )
        pc = await client.create_mint(
            payer, config.decimals, config.token_program_id, config.transfer_hook_program_id
        )
        wrappers = None
        if with_spl_wrappers:
            wrappers = (
                await client.create_mint(payer, config.decimals, TOKEN_PROGRAM_ID),
                await client.create_mint(payer, config.decimals, TOKEN_PROGRAM_ID),
            )

    values = {
        "COIN_MINT": str(coin.mint),
        "PC_MINT": str(pc.mint),
        "USER_COIN_ACCOUNT": str(coin.ata),
        "USER_PC_ACCOUNT": str(pc.ata),
        "COIN_TOKEN_PROGRAM": str(coin.token_program_id),
        "PC_TOKEN_PROGRAM": str(pc.token_program_id),
    }
    if coin.has_transfer_hook:
        values["TRANSFER_HOOK_PROGRAM_ID"] = str(coin.transfer_hook_program_id)
    if wrappers is not None:
        values["COIN_MINT_SPL"] = str(wrappers[0].mint)
        values["PC_MINT_SPL"] = str(wrappers[1].mint)
    _print_env(values)
    return 0


def _cmd_create_tokens(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    config = TokenSetupConfig.from_env(env)
    payer = cluster.load_payer()
    return asyncio.run(_create_tokens(cluster, config, payer, args.with_spl_wrappers))


async def _create_market(
    cluster: ClusterConfig, config: MarketSetupConfig, payer: Keypair
) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, confirm_timeout=cluster.confirm_timeout)
        market = await client.create_market_accounts(
            payer, config.openbook_program_id, config.coin_mint, config.pc_mint
        )
    logger.warning("Market accounts are allocated but not initialized by the market program")
    _print_env(market.as_env())
    return 0


def _cmd_create_market(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    config = MarketSetupConfig.from_env(env)
    payer = cluster.load_payer()
    return asyncio.run(_create_market(cluster, config, payer))


async def _init_pool(
    cluster: ClusterConfig,
    program_id: Pubkey,
    params: InitializePoolParams,
    payer: Keypair,
) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, program_id, confirm_timeout=cluster.confirm_timeout)
        await client.require_account(params.market)
        tx = await client.initialize_pool(params)
        signature = await client.sign_and_send(tx, [payer])

    pool = get_pool_addresses(program_id, params.market)
    print(f"Init pool tx: {signature}")
    _print_env(pool.as_env())
    _print_env({"USER_LP_ACCOUNT": str(get_associated_token_address(payer.pubkey(), pool.lp_mint))})
    return 0


def _cmd_init_pool(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    program_id = load_amm_program_id(env)
    payer = cluster.load_payer()
    params = load_initialize_pool_params(env, payer.pubkey())
    return asyncio.run(_init_pool(cluster, program_id, params, payer))


async def _deposit(
    cluster: ClusterConfig, program_id: Pubkey, params: DepositParams, payer: Keypair
) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, program_id, confirm_timeout=cluster.confirm_timeout)
        tx = await client.deposit(params)
        signature = await client.sign_and_send(tx, [payer])
    print(f"Deposit tx: {signature}")
    return 0


def _cmd_deposit(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    program_id = load_amm_program_id(env)
    payer = cluster.load_payer()
    params = load_deposit_params(env, payer.pubkey())
    return asyncio.run(_deposit(cluster, program_id, params, payer))


async def _swap(
    cluster: ClusterConfig, program_id: Pubkey, params: SwapBaseInParams, payer: Keypair
) -> int:
    async with cluster.connect() as connection:
        client = AmmClient(connection, program_id, confirm_timeout=cluster.confirm_timeout)
        await client.require_account(params.user_source)
        tx = await client.swap_base_in(params)
        signature = await client.sign_and_send(tx, [payer])
    print(f"Swap tx: {signature}")
    return 0


def _cmd_swap(args: argparse.Namespace, env: Environment) -> int:
    cluster = ClusterConfig.from_env(env)
    program_id = load_amm_program_id(env)
    payer = cluster.load_payer()
    params = load_swap_params(env, payer.pubkey())
    return asyncio.run(_swap(cluster, program_id, params, payer))


def _cmd_derive(args: argparse.Namespace, env: Environment) -> int:
    program_id = load_amm_program_id(env)
    if args.market:
        try:
            market = Pubkey.from_string(args.market.strip())
        except ValueError as e:
            raise ConfigurationError.invalid("--market", args.market, "not a valid pubkey") from e
    else:
        market = env.get_pubkey("MARKET_ADDRESS")
    pool = get_pool_addresses(program_id, market)
    _print_env(pool.as_env())
    print(f"AMM_NONCE={pool.nonce}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) or "amm-client",
        description="Drive a deployed AMM program over RPC",
    )
    parser.add_argument("--env-file", default=None, help="Path to a .env file (default: nearest .env)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_smoke = sub.add_parser("smoke", help="Call the program with an empty instruction")
    p_smoke.set_defaults(func=_cmd_smoke)

    p_airdrop = sub.add_parser("airdrop", help="Request an airdrop if the wallet balance is low")
    p_airdrop.add_argument("--min-sol", type=float, default=1.0, help="Minimum balance in SOL")
    p_airdrop.set_defaults(func=_cmd_airdrop)

    p_tokens = sub.add_parser("create-tokens", help="Create coin and pc test mints")
    p_tokens.add_argument(
        "--with-spl-wrappers",
        action="store_true",
        help="Also create classic SPL mints for market creation",
    )
    p_tokens.set_defaults(func=_cmd_create_tokens)

    p_market = sub.add_parser("create-market", help="Allocate OpenBook market accounts")
    p_market.set_defaults(func=_cmd_create_market)

    p_init = sub.add_parser("init-pool", help="Initialize a pool (initialize2)")
    p_init.set_defaults(func=_cmd_init_pool)

    p_deposit = sub.add_parser("deposit", help="Deposit liquidity")
    p_deposit.set_defaults(func=_cmd_deposit)

    p_swap = sub.add_parser("swap", help="Swap an exact input amount (swap_base_in)")
    p_swap.set_defaults(func=_cmd_swap)

    p_derive = sub.add_parser("derive", help="Print the pool addresses for a market")
    p_derive.add_argument("--market", default=None, help="Market address (default: MARKET_ADDRESS)")
    p_derive.set_defaults(func=_cmd_derive)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        env = Environment.load(args.env_file)
        return args.func(args, env)
    except AmmClientError as e:
        logger.error(str(e))
        return 1
    except (RPCException, RPCNoResultException, SolanaRpcException) as e:
        logger.error(f"RPC request failed: {e}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
