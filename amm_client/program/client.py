"""Async client that builds, submits and confirms AMM transactions."""

import asyncio
import logging
import time
from typing import List, Optional, Sequence

from solana.rpc.async_api import AsyncClient
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.message import Message
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.system_program import CreateAccountParams, create_account
from solders.transaction import Transaction
from solders.transaction_status import TransactionConfirmationStatus

from .constants import (
    DEFAULT_TOKEN_DECIMALS,
    EVENT_QUEUE_SIZE,
    LAMPORTS_PER_SOL,
    MARKET_ACCOUNT_SIZE,
    ORDERBOOK_SIZE,
    REQUEST_QUEUE_SIZE,
    TOKEN_PROGRAM_ID,
)
from .errors import (
    AccountNotFoundError,
    ConfigurationError,
    ConfirmationTimeoutError,
    TransactionRejectedError,
)
from .instructions import (
    build_deposit_instruction,
    build_initialize2_instruction,
    build_smoke_instruction,
    build_swap_base_in_instruction,
)
from .pda import get_pool_addresses, get_vault_signer_address
from .token import build_create_ata_instruction, build_create_mint_instructions, get_mint_size
from .types import (
    CreatedMarket,
    CreatedMint,
    DepositParams,
    InitializePoolParams,
    PoolAddresses,
    SwapBaseInParams,
)
from .utils import get_associated_token_address

logger = logging.getLogger(__name__)

DEFAULT_CONFIRM_TIMEOUT_SECS = 60.0
DEFAULT_POLL_INTERVAL_SECS = 1.0

_CONFIRMED = (TransactionConfirmationStatus.Confirmed, TransactionConfirmationStatus.Finalized)


class AmmClient:
    """Async client for driving a deployed AMM program.

    Every operation is a single build-sign-send-confirm round trip. Failures
    are surfaced to the caller unchanged; nothing is retried.
    """

    def __init__(
        self,
        connection: AsyncClient,
        program_id: Optional[Pubkey] = None,
        confirm_timeout: float = DEFAULT_CONFIRM_TIMEOUT_SECS,
        poll_interval: float = DEFAULT_POLL_INTERVAL_SECS,
    ):
        """Initialize the client.

        Args:
            connection: Solana RPC async client
            program_id: AMM program ID; only needed for pool operations
            confirm_timeout: Seconds to wait for confirmation
            poll_interval: Seconds between signature status polls
        """
        self.connection = connection
        self._program_id = program_id
        self.confirm_timeout = confirm_timeout
        self.poll_interval = poll_interval

    @property
    def program_id(self) -> Pubkey:
        if self._program_id is None:
            raise ConfigurationError("AMM program id is not set", "program_id")
        return self._program_id

    def get_pool_addresses(self, market: Pubkey) -> PoolAddresses:
        """Derive every pool account for a market."""
        return get_pool_addresses(self.program_id, market)

    # =========================================================================
    # Account Helpers
    # =========================================================================

    async def get_balance(self, pubkey: Pubkey) -> int:
        """Get the lamport balance of an account."""
        response = await self.connection.get_balance(pubkey)
        return response.value

    async def account_exists(self, pubkey: Pubkey) -> bool:
        """Check whether an account exists on-chain."""
        response = await self.connection.get_account_info(pubkey)
        return response.value is not None

    async def require_account(self, pubkey: Pubkey) -> None:
        """Raise AccountNotFoundError if ``pubkey`` does not exist on-chain."""
        if not await self.account_exists(pubkey):
            raise AccountNotFoundError(str(pubkey))

    async def airdrop_if_needed(
        self, pubkey: Pubkey, min_balance: int = LAMPORTS_PER_SOL
    ) -> Optional[Signature]:
        """Request an airdrop of ``min_balance`` if the balance is below it."""
        balance = await self.get_balance(pubkey)
        if balance >= min_balance:
            logger.debug(f"Balance {balance} >= {min_balance}, no airdrop needed")
            return None

        logger.info(f"Balance low ({balance / LAMPORTS_PER_SOL:.2f} SOL), requesting airdrop")
        try:
            response = await self.connection.request_airdrop(pubkey, min_balance)
        except RPCException as e:
            raise TransactionRejectedError(str(e)) from e
        await self.confirm(response.value)
        return response.value

    # =========================================================================
    # Transaction Builders
    # =========================================================================

    async def smoke(self, payer: Pubkey) -> Transaction:
        """Build a transaction calling the program with no accounts or data."""
        ix = build_smoke_instruction(self.program_id)
        return await self._build_transaction([ix], payer)

    async def initialize_pool(self, params: InitializePoolParams) -> Transaction:
        """Build an initialize2 (create pool) transaction."""
        ix = build_initialize2_instruction(params, self.program_id)
        return await self._build_transaction([ix], params.payer)

    async def deposit(self, params: DepositParams) -> Transaction:
        """Build a deposit transaction."""
        ix = build_deposit_instruction(params, self.program_id)
        return await self._build_transaction([ix], params.owner)

    async def swap_base_in(self, params: SwapBaseInParams) -> Transaction:
        """Build a swap_base_in transaction."""
        ix = build_swap_base_in_instruction(params, self.program_id)
        return await self._build_transaction([ix], params.owner)

    # =========================================================================
    # Submission
    # =========================================================================

    async def sign_and_send(
        self, tx: Transaction, signers: Sequence[Keypair]
    ) -> Signature:
        """Sign with a fresh blockhash, send without preflight and wait for confirmation.

        Raises:
            TransactionRejectedError: If the node or program rejects the transaction
            ConfirmationTimeoutError: If confirmation is not observed in time
        """
        blockhash = await self._get_blockhash()
        tx.sign(list(signers), blockhash)

        try:
            response = await self.connection.send_raw_transaction(
                bytes(tx), opts=TxOpts(skip_preflight=True)
            )
        except RPCException as e:
            raise TransactionRejectedError(str(e)) from e

        signature = response.value
        logger.info(f"Sent transaction {signature}")
        await self.confirm(signature)
        return signature

    async def send_instructions(
        self,
        instructions: List[Instruction],
        payer: Keypair,
        extra_signers: Sequence[Keypair] = (),
    ) -> Signature:
        """Build, sign, send and confirm a transaction paid for by ``payer``."""
        tx = await self._build_transaction(instructions, payer.pubkey())
        return await self.sign_and_send(tx, [payer, *extra_signers])

    async def confirm(self, signature: Signature) -> None:
        """Poll signature status until confirmed, rejected or timed out."""
        deadline = time.monotonic() + self.confirm_timeout
        while True:
            response = await self.connection.get_signature_statuses([signature])
            status = response.value[0]
            if status is not None:
                if status.err is not None:
                    raise TransactionRejectedError(str(status.err), str(signature))
                if status.confirmation_status in _CONFIRMED:
                    logger.debug(f"Transaction {signature} confirmed")
                    return
            if time.monotonic() >= deadline:
                raise ConfirmationTimeoutError(str(signature), self.confirm_timeout)
            await asyncio.sleep(self.poll_interval)

    # =========================================================================
    # Setup Helpers
    # =========================================================================

    async def ensure_associated_token_account(
        self,
        payer: Keypair,
        owner: Pubkey,
        mint: Pubkey,
        token_program_id: Pubkey = TOKEN_PROGRAM_ID,
    ) -> Pubkey:
        """Return the owner's ATA for ``mint``, creating it if it does not exist."""
        ata = get_associated_token_address(owner, mint, token_program_id)
        if await self.account_exists(ata):
            return ata

        ix, _ = build_create_ata_instruction(payer.pubkey(), owner, mint, token_program_id)
        await self.send_instructions([ix], payer)
        logger.info(f"Created associated token account {ata}")
        return ata

    async def create_mint(
        self,
        payer: Keypair,
        decimals: int = DEFAULT_TOKEN_DECIMALS,
        token_program_id: Pubkey = TOKEN_PROGRAM_ID,
        transfer_hook_program_id: Optional[Pubkey] = None,
    ) -> CreatedMint:
        """Create a mint owned by ``payer`` with an ATA and initial supply."""
        mint = Keypair()
        space = get_mint_size(with_transfer_hook=transfer_hook_program_id is not None)
        lamports = await self._get_rent_exemption(space)

        instructions, ata = build_create_mint_instructions(
            payer=payer.pubkey(),
            mint=mint.pubkey(),
            decimals=decimals,
            lamports=lamports,
            token_program_id=token_program_id,
            transfer_hook_program_id=transfer_hook_program_id,
        )
        await self.send_instructions(instructions, payer, [mint])
        logger.info(f"Created mint {mint.pubkey()} (token program {token_program_id})")

        return CreatedMint(
            mint=mint.pubkey(),
            ata=ata,
            token_program_id=token_program_id,
            transfer_hook_program_id=transfer_hook_program_id,
        )

    async def create_market_accounts(
        self,
        payer: Keypair,
        openbook_program_id: Pubkey,
        coin_mint: Pubkey,
        pc_mint: Pubkey,
    ) -> CreatedMarket:
        """Allocate the accounts of an OpenBook market without initializing it.

        The payer's classic-token ATAs stand in for the market vaults.
        """
        market = await self._create_program_account(payer, MARKET_ACCOUNT_SIZE, openbook_program_id)
        event_queue = await self._create_program_account(payer, EVENT_QUEUE_SIZE, openbook_program_id)
        request_queue = await self._create_program_account(
            payer, REQUEST_QUEUE_SIZE, openbook_program_id
        )
        bids = await self._create_program_account(payer, ORDERBOOK_SIZE, openbook_program_id)
        asks = await self._create_program_account(payer, ORDERBOOK_SIZE, openbook_program_id)

        coin_vault = await self.ensure_associated_token_account(payer, payer.pubkey(), coin_mint)
        pc_vault = await self.ensure_associated_token_account(payer, payer.pubkey(), pc_mint)
        vault_signer, _ = get_vault_signer_address(openbook_program_id)

        return CreatedMarket(
            market=market,
            event_queue=event_queue,
            request_queue=request_queue,
            bids=bids,
            asks=asks,
            coin_vault=coin_vault,
            pc_vault=pc_vault,
            vault_signer=vault_signer,
        )

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    async def _create_program_account(
        self, payer: Keypair, space: int, owner: Pubkey
    ) -> Pubkey:
        account = Keypair()
        lamports = await self._get_rent_exemption(space)
        ix = create_account(
            CreateAccountParams(
                from_pubkey=payer.pubkey(),
                to_pubkey=account.pubkey(),
                lamports=lamports,
                space=space,
                owner=owner,
            )
        )
        await self.send_instructions([ix], payer, [account])
        logger.info(f"Created {space}-byte account {account.pubkey()} owned by {owner}")
        return account.pubkey()

    async def _get_rent_exemption(self, space: int) -> int:
        response = await self.connection.get_minimum_balance_for_rent_exemption(space)
        return response.value

    async def _build_transaction(
        self, instructions: List[Instruction], payer: Pubkey
    ) -> Transaction:
        """Build an unsigned transaction with ``payer`` as fee payer."""
        blockhash = await self._get_blockhash()
        message = Message.new_with_blockhash(instructions, payer, blockhash)
        return Transaction.new_unsigned(message)

    async def _get_blockhash(self) -> Hash:
        """Get the latest blockhash."""
        response = await self.connection.get_latest_blockhash()
        return response.value.blockhash
