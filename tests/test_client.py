"""Tests for the client module."""

import pytest
from solana.rpc.core import RPCException
from solders.hash import Hash
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction_status import TransactionConfirmationStatus

from amm_client import (
    AccountNotFoundError,
    AmmClient,
    ConfigurationError,
    ConfirmationTimeoutError,
    DepositParams,
    InitializePoolParams,
    TransactionRejectedError,
    get_pool_addresses,
)
from amm_client.program import TOKEN_2022_PROGRAM_ID
from amm_client.program.utils import get_associated_token_address


class MockResponse:
    def __init__(self, value):
        self.value = value


class MockBlockhash:
    def __init__(self, blockhash):
        self.blockhash = blockhash


class MockStatus:
    def __init__(self, err=None, confirmation_status=TransactionConfirmationStatus.Confirmed):
        self.err = err
        self.confirmation_status = confirmation_status


class MockConnection:
    """Mock Solana connection for testing."""

    def __init__(self, statuses=None, balance=0, send_error=None, existing=()):
        self.statuses = list(statuses or [MockStatus()])
        self.balance = balance
        self.send_error = send_error
        self.existing = set(existing)
        self.sent = []
        self.airdrops = []
        self.status_polls = 0

    async def get_latest_blockhash(self):
        return MockResponse(MockBlockhash(Hash.default()))

    async def send_raw_transaction(self, txn, opts=None):
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((txn, opts))
        return MockResponse(Signature.default())

    async def get_signature_statuses(self, signatures):
        self.status_polls += 1
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        return MockResponse([status])

    async def get_account_info(self, pubkey):
        return MockResponse(object() if pubkey in self.existing else None)

    async def get_balance(self, pubkey):
        return MockResponse(self.balance)

    async def request_airdrop(self, pubkey, lamports):
        self.airdrops.append((pubkey, lamports))
        return MockResponse(Signature.default())

    async def get_minimum_balance_for_rent_exemption(self, space):
        return MockResponse(space * 10)


def make_client(connection=None, program_id=None, **kwargs):
    kwargs.setdefault("poll_interval", 0)
    return AmmClient(connection or MockConnection(), program_id or Pubkey.new_unique(), **kwargs)


class TestClientInit:
    def test_program_id(self):
        program_id = Pubkey.new_unique()
        client = AmmClient(MockConnection(), program_id)

        assert client.program_id == program_id

    def test_program_id_required_for_pool_operations(self):
        client = AmmClient(MockConnection())

        with pytest.raises(ConfigurationError, match="program id"):
            client.program_id

    def test_get_pool_addresses(self, market):
        client = make_client()

        assert client.get_pool_addresses(market) == get_pool_addresses(client.program_id, market)


class TestTransactionBuilders:
    @pytest.mark.asyncio
    async def test_smoke(self):
        client = make_client()
        payer = Keypair()

        tx = await client.smoke(payer.pubkey())

        assert tx.message.account_keys[0] == payer.pubkey()
        assert len(tx.message.instructions) == 1
        assert bytes(tx.message.instructions[0].data) == b""

    @pytest.mark.asyncio
    async def test_initialize_pool_fee_payer(self, market):
        client = make_client()
        payer = Keypair()
        params = InitializePoolParams(
            payer=payer.pubkey(),
            market=market,
            coin_mint=Pubkey.new_unique(),
            pc_mint=Pubkey.new_unique(),
            user_coin=Pubkey.new_unique(),
            user_pc=Pubkey.new_unique(),
            init_coin_amount=1,
            init_pc_amount=1,
            open_time=0,
        )

        tx = await client.initialize_pool(params)

        assert tx.message.account_keys[0] == payer.pubkey()
        assert bytes(tx.message.instructions[0].data)[0] == 1

    @pytest.mark.asyncio
    async def test_deposit_is_unsigned(self, market):
        client = make_client()
        owner = Keypair()
        params = DepositParams(
            owner=owner.pubkey(),
            market=market,
            market_event_queue=Pubkey.new_unique(),
            user_coin=Pubkey.new_unique(),
            user_pc=Pubkey.new_unique(),
            max_coin_amount=10,
            max_pc_amount=10,
        )

        tx = await client.deposit(params)

        assert tx.signatures[0] == Signature.default()


class TestSignAndSend:
    @pytest.mark.asyncio
    async def test_sends_without_preflight_and_confirms(self):
        connection = MockConnection()
        client = make_client(connection)
        payer = Keypair()

        tx = await client.smoke(payer.pubkey())
        signature = await client.sign_and_send(tx, [payer])

        assert signature == Signature.default()
        assert len(connection.sent) == 1
        assert connection.sent[0][1].skip_preflight is True
        assert connection.status_polls == 1

    @pytest.mark.asyncio
    async def test_send_error_is_rejection(self):
        connection = MockConnection(send_error=RPCException("blockhash not found"))
        client = make_client(connection)
        payer = Keypair()

        tx = await client.smoke(payer.pubkey())
        with pytest.raises(TransactionRejectedError, match="blockhash not found"):
            await client.sign_and_send(tx, [payer])

    @pytest.mark.asyncio
    async def test_program_error_is_rejection(self):
        connection = MockConnection(
            statuses=[MockStatus(err="InstructionError(0, InvalidInstructionData)")]
        )
        client = make_client(connection)
        payer = Keypair()

        tx = await client.smoke(payer.pubkey())
        with pytest.raises(TransactionRejectedError) as exc_info:
            await client.sign_and_send(tx, [payer])

        assert "InvalidInstructionData" in exc_info.value.message
        assert exc_info.value.signature == str(Signature.default())


class TestConfirm:
    @pytest.mark.asyncio
    async def test_waits_until_confirmed(self):
        connection = MockConnection(
            statuses=[
                None,
                MockStatus(confirmation_status=TransactionConfirmationStatus.Processed),
                MockStatus(confirmation_status=TransactionConfirmationStatus.Finalized),
            ]
        )
        client = make_client(connection)

        await client.confirm(Signature.default())

        assert connection.status_polls == 3

    @pytest.mark.asyncio
    async def test_times_out(self):
        connection = MockConnection(statuses=[None])
        client = make_client(connection, confirm_timeout=0)

        with pytest.raises(ConfirmationTimeoutError) as exc_info:
            await client.confirm(Signature.default())

        assert exc_info.value.timeout == 0


class TestAccountHelpers:
    @pytest.mark.asyncio
    async def test_account_exists(self):
        known = Pubkey.new_unique()
        client = make_client(MockConnection(existing=[known]))

        assert await client.account_exists(known) is True
        assert await client.account_exists(Pubkey.new_unique()) is False

    @pytest.mark.asyncio
    async def test_require_account(self):
        known = Pubkey.new_unique()
        missing = Pubkey.new_unique()
        client = make_client(MockConnection(existing=[known]))

        await client.require_account(known)
        with pytest.raises(AccountNotFoundError) as exc_info:
            await client.require_account(missing)

        assert exc_info.value.address == str(missing)

    @pytest.mark.asyncio
    async def test_airdrop_skipped_when_funded(self):
        connection = MockConnection(balance=2_000_000_000)
        client = make_client(connection)

        assert await client.airdrop_if_needed(Pubkey.new_unique()) is None
        assert connection.airdrops == []

    @pytest.mark.asyncio
    async def test_airdrop_requested_when_low(self):
        connection = MockConnection(balance=0)
        client = AmmClient(connection, poll_interval=0)
        wallet = Pubkey.new_unique()

        signature = await client.airdrop_if_needed(wallet, 500)

        assert signature == Signature.default()
        assert connection.airdrops == [(wallet, 500)]

    @pytest.mark.asyncio
    async def test_ensure_ata_skips_existing(self):
        owner = Keypair()
        mint = Pubkey.new_unique()
        ata = get_associated_token_address(owner.pubkey(), mint)
        connection = MockConnection(existing=[ata])
        client = make_client(connection)

        assert await client.ensure_associated_token_account(owner, owner.pubkey(), mint) == ata
        assert connection.sent == []


class TestSetupHelpers:
    @pytest.mark.asyncio
    async def test_create_mint(self):
        connection = MockConnection()
        client = AmmClient(connection, poll_interval=0)
        payer = Keypair()
        hook = Pubkey.new_unique()

        created = await client.create_mint(payer, 6, TOKEN_2022_PROGRAM_ID, hook)

        assert created.token_program_id == TOKEN_2022_PROGRAM_ID
        assert created.has_transfer_hook
        assert len(connection.sent) == 1

    @pytest.mark.asyncio
    async def test_create_market_accounts(self):
        connection = MockConnection()
        client = AmmClient(connection, poll_interval=0)
        payer = Keypair()

        market = await client.create_market_accounts(
            payer, Pubkey.new_unique(), Pubkey.new_unique(), Pubkey.new_unique()
        )

        # Five program accounts plus two vault ATAs
        assert len(connection.sent) == 7
        assert market.coin_vault != market.pc_vault
        assert set(market.as_env()) >= {"MARKET_ADDRESS", "MARKET_VAULT_SIGNER"}
