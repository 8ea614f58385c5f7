"""Configuration records built once from environment-style names.

Values come from a ``.env`` file (via python-dotenv) overlaid by the
process environment. A name either has a value, a fallback, or raises
``ConfigurationError`` before any network call is made.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from dotenv import dotenv_values, find_dotenv
from solana.rpc.async_api import AsyncClient
from solana.rpc.commitment import Commitment
from solders.keypair import Keypair
from solders.pubkey import Pubkey

from .program.client import DEFAULT_CONFIRM_TIMEOUT_SECS
from .program.constants import (
    CREATE_POOL_FEE_DESTINATION,
    DEFAULT_RPC_URL,
    DEFAULT_TOKEN_DECIMALS,
    DEFAULT_WALLET_PATH,
    OPEN_TIME_OFFSET_SECS,
    OPENBOOK_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    U64_MAX,
)
from .program.errors import ConfigurationError
from .program.types import (
    BaseSide,
    DepositParams,
    InitializePoolParams,
    MarketAccounts,
    SwapBaseInParams,
)
from .program.utils import expand_path, now_in_seconds

_MISSING: Any = object()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Environment:
    """Flat name -> string mapping with required-vs-fallback lookups."""

    def __init__(self, values: Mapping[str, str]):
        self._values = dict(values)

    @classmethod
    def load(
        cls,
        env_file: Optional[Union[str, Path]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Environment":
        """Read ``env_file`` (or the nearest ``.env``) and overlay the process environment."""
        values: dict[str, str] = {}
        path = str(env_file) if env_file is not None else find_dotenv(usecwd=True)
        if path:
            if not Path(path).is_file():
                raise ConfigurationError(f"Environment file not found: {path}")
            values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
        values.update(os.environ if environ is None else environ)
        return cls(values)

    def __contains__(self, name: str) -> bool:
        return bool(self._values.get(name))

    def get(self, name: str, fallback: Any = _MISSING) -> str:
        """Return the value for ``name``; empty counts as unset.

        Raises:
            ConfigurationError: If unset and no fallback is given
        """
        value = self._values.get(name)
        if value:
            return value
        if fallback is not _MISSING:
            return fallback
        raise ConfigurationError.missing(name)

    def get_optional(self, name: str) -> Optional[str]:
        return self.get(name, None)

    def get_pubkey(self, name: str, fallback: Any = _MISSING) -> Pubkey:
        value = self.get(name, fallback)
        if isinstance(value, Pubkey):
            return value
        try:
            return Pubkey.from_string(value.strip())
        except ValueError as e:
            raise ConfigurationError.invalid(name, value, "not a valid pubkey") from e

    def get_optional_pubkey(self, name: str) -> Optional[Pubkey]:
        if name not in self:
            return None
        return self.get_pubkey(name)

    def get_int(
        self,
        name: str,
        fallback: Any = _MISSING,
        minimum: int = 0,
        maximum: int = U64_MAX,
    ) -> int:
        """Parse an integer and check it lies in [minimum, maximum] (u64 by default)."""
        raw = self.get(name, fallback)
        try:
            value = int(str(raw).strip(), 10)
        except ValueError as e:
            raise ConfigurationError.invalid(name, str(raw), "not an integer") from e
        if not minimum <= value <= maximum:
            raise ConfigurationError.invalid(
                name, str(raw), f"must be between {minimum} and {maximum}"
            )
        return value

    def get_optional_int(self, name: str, **bounds: int) -> Optional[int]:
        if name not in self:
            return None
        return self.get_int(name, **bounds)

    def get_bool(self, name: str, fallback: Any = _MISSING) -> bool:
        raw = self.get(name, fallback)
        if isinstance(raw, bool):
            return raw
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ConfigurationError.invalid(name, raw, "not a boolean")

    def get_path(self, name: str, fallback: Any = _MISSING) -> Path:
        return expand_path(str(self.get(name, fallback)))


def load_keypair(path: Union[str, Path]) -> Keypair:
    """Load a keypair from a JSON array of secret key bytes.

    Raises:
        ConfigurationError: If the file is unreadable or not a valid keypair
    """
    resolved = expand_path(str(path))
    try:
        with open(resolved, "r") as f:
            secret = json.load(f)
        return Keypair.from_bytes(bytes(secret))
    except (OSError, ValueError, TypeError) as e:
        raise ConfigurationError(f"Cannot load keypair from {resolved}: {e}") from e


@dataclass
class ClusterConfig:
    """RPC endpoint, wallet and confirmation settings."""

    rpc_url: str = DEFAULT_RPC_URL
    wallet_path: Path = expand_path(DEFAULT_WALLET_PATH)
    commitment: str = "confirmed"
    confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT_SECS

    @classmethod
    def from_env(cls, env: Environment) -> "ClusterConfig":
        return cls(
            rpc_url=env.get("SOLANA_RPC_URL", DEFAULT_RPC_URL),
            wallet_path=env.get_path("WALLET_PATH", DEFAULT_WALLET_PATH),
            commitment=env.get("SOLANA_COMMITMENT", "confirmed"),
            confirm_timeout=float(
                env.get_int("CONFIRM_TIMEOUT_SECS", int(DEFAULT_CONFIRM_TIMEOUT_SECS), minimum=1)
            ),
        )

    def connect(self) -> AsyncClient:
        """Open an async RPC client for this cluster."""
        return AsyncClient(self.rpc_url, commitment=Commitment(self.commitment))

    def load_payer(self) -> Keypair:
        return load_keypair(self.wallet_path)


def load_amm_program_id(env: Environment) -> Pubkey:
    return env.get_pubkey("RAYDIUM_AMM_PROGRAM_ID")


def load_initialize_pool_params(
    env: Environment,
    payer: Pubkey,
    now: Optional[int] = None,
) -> InitializePoolParams:
    """Build initialize2 parameters; open time defaults to 30 seconds ago."""
    open_time = env.get_optional_int("OPEN_TIME")
    if open_time is None:
        open_time = (now if now is not None else now_in_seconds()) - OPEN_TIME_OFFSET_SECS

    return InitializePoolParams(
        payer=payer,
        market=env.get_pubkey("MARKET_ADDRESS"),
        coin_mint=env.get_pubkey("COIN_MINT"),
        pc_mint=env.get_pubkey("PC_MINT"),
        user_coin=env.get_pubkey("USER_COIN_ACCOUNT"),
        user_pc=env.get_pubkey("USER_PC_ACCOUNT"),
        init_coin_amount=env.get_int("INIT_COIN", "1000000"),
        init_pc_amount=env.get_int("INIT_PC", "1000000"),
        open_time=open_time,
        openbook_program_id=env.get_pubkey("OPENBOOK_PROGRAM_ID", OPENBOOK_PROGRAM_ID),
        create_fee_destination=env.get_pubkey(
            "CREATE_POOL_FEE_DEST", CREATE_POOL_FEE_DESTINATION
        ),
        token_program_id=env.get_pubkey("COIN_TOKEN_PROGRAM", TOKEN_PROGRAM_ID),
    )


def load_deposit_params(env: Environment, owner: Pubkey) -> DepositParams:
    """Build deposit parameters.

    The trailing minimum is only encoded when DEPOSIT_OTHER_AMOUNT_MIN is set;
    set it only if the deployed program expects the 33-byte layout.
    """
    return DepositParams(
        owner=owner,
        market=env.get_pubkey("MARKET_ADDRESS"),
        market_event_queue=env.get_pubkey("MARKET_EVENT_Q"),
        user_coin=env.get_pubkey("USER_COIN_ACCOUNT"),
        user_pc=env.get_pubkey("USER_PC_ACCOUNT"),
        max_coin_amount=env.get_int("DEPOSIT_MAX_COIN", "1000"),
        max_pc_amount=env.get_int("DEPOSIT_MAX_PC", "1000"),
        base_side=BaseSide(env.get_int("DEPOSIT_BASE_SIDE", "0", maximum=1)),
        other_amount_min=env.get_optional_int("DEPOSIT_OTHER_AMOUNT_MIN"),
    )


def load_market_accounts(env: Environment) -> MarketAccounts:
    return MarketAccounts(
        bids=env.get_pubkey("MARKET_BIDS"),
        asks=env.get_pubkey("MARKET_ASKS"),
        event_queue=env.get_pubkey("MARKET_EVENT_Q"),
        coin_vault=env.get_pubkey("MARKET_COIN_VAULT"),
        pc_vault=env.get_pubkey("MARKET_PC_VAULT"),
        vault_signer=env.get_pubkey("MARKET_VAULT_SIGNER"),
    )


def load_swap_params(env: Environment, owner: Pubkey) -> SwapBaseInParams:
    """Build swap_base_in parameters."""
    return SwapBaseInParams(
        owner=owner,
        market=env.get_pubkey("MARKET_ADDRESS"),
        market_accounts=load_market_accounts(env),
        user_source=env.get_pubkey("SWAP_SOURCE_ATA"),
        user_destination=env.get_pubkey("SWAP_DEST_ATA"),
        amount_in=env.get_int("SWAP_AMOUNT_IN", "100"),
        minimum_amount_out=env.get_int("SWAP_MINIMUM_OUT", "1"),
        openbook_program_id=env.get_pubkey("OPENBOOK_PROGRAM_ID", OPENBOOK_PROGRAM_ID),
    )


@dataclass
class TokenSetupConfig:
    """Settings for creating the coin / pc test mints."""

    use_token_2022: bool = True
    transfer_hook_program_id: Optional[Pubkey] = None
    decimals: int = DEFAULT_TOKEN_DECIMALS

    @classmethod
    def from_env(cls, env: Environment) -> "TokenSetupConfig":
        config = cls(
            use_token_2022=env.get_bool("USE_TOKEN_2022", True),
            transfer_hook_program_id=env.get_optional_pubkey("TRANSFER_HOOK_PROGRAM_ID"),
            decimals=env.get_int("TOKEN_DECIMALS", str(DEFAULT_TOKEN_DECIMALS), maximum=255),
        )
        if config.transfer_hook_program_id is not None and not config.use_token_2022:
            raise ConfigurationError(
                "TRANSFER_HOOK_PROGRAM_ID requires USE_TOKEN_2022=true",
                "TRANSFER_HOOK_PROGRAM_ID",
            )
        return config

    @property
    def token_program_id(self) -> Pubkey:
        return TOKEN_2022_PROGRAM_ID if self.use_token_2022 else TOKEN_PROGRAM_ID


@dataclass
class MarketSetupConfig:
    """Settings for allocating OpenBook market accounts."""

    openbook_program_id: Pubkey
    coin_mint: Pubkey
    pc_mint: Pubkey

    @classmethod
    def from_env(cls, env: Environment) -> "MarketSetupConfig":
        return cls(
            openbook_program_id=env.get_pubkey("OPENBOOK_PROGRAM_ID", OPENBOOK_PROGRAM_ID),
            coin_mint=env.get_pubkey("COIN_MINT_SPL"),
            pc_mint=env.get_pubkey("PC_MINT_SPL"),
        )
