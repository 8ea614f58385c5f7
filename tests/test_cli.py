"""Tests for the command line entry points."""

import pytest
from solana.rpc.core import RPCException, RPCNoResultException
from solders.hash import Hash
from solders.pubkey import Pubkey
from solders.signature import Signature

from amm_client import cli, get_pool_addresses
from amm_client.config import ClusterConfig


class MockResponse:
    def __init__(self, value):
        self.value = value


class MockBlockhash:
    def __init__(self, blockhash):
        self.blockhash = blockhash


class MockStatus:
    def __init__(self, err):
        self.err = err
        self.confirmation_status = None


class RejectingConnection:
    """Connection whose transactions always fail on-chain."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def get_latest_blockhash(self):
        return MockResponse(MockBlockhash(Hash.default()))

    async def send_raw_transaction(self, txn, opts=None):
        return MockResponse(Signature.default())

    async def get_signature_statuses(self, signatures):
        return MockResponse([MockStatus("InstructionError(0, InvalidInstructionData)")])



class UnreachableNodeConnection(RejectingConnection):
    """Connection whose RPC requests fail before a transaction is built."""

    def __init__(self, error):
        self.error = error

    async def get_latest_blockhash(self):
        raise self.error


@pytest.fixture
def env_file(tmp_path, monkeypatch, keypair_file):
    monkeypatch.delenv("RAYDIUM_AMM_PROGRAM_ID", raising=False)
    monkeypatch.delenv("MARKET_ADDRESS", raising=False)
    monkeypatch.delenv("WALLET_PATH", raising=False)

    path = tmp_path / ".env"
    program_id = Pubkey.new_unique()
    wallet, _ = keypair_file
    path.write_text(f"RAYDIUM_AMM_PROGRAM_ID={program_id}\nWALLET_PATH={wallet}\n")
    return path, program_id


def parse_output(text):
    return dict(line.split("=", 1) for line in text.splitlines() if "=" in line)


class TestParser:
    def test_subcommand_required(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_known_commands(self):
        parser = cli.build_parser()

        for command in ["smoke", "airdrop", "create-tokens", "create-market", "init-pool", "deposit", "swap", "derive"]:
            assert parser.parse_args([command]).cmd == command


class TestDerive:
    def test_prints_pool_addresses(self, env_file, capsys):
        path, program_id = env_file
        market = Pubkey.new_unique()

        code = cli.main(["--env-file", str(path), "derive", "--market", str(market)])

        output = parse_output(capsys.readouterr().out)
        pool = get_pool_addresses(program_id, market)
        assert code == 0
        assert output["AMM_POOL"] == str(pool.amm_pool)
        assert output["AMM_LP_MINT"] == str(pool.lp_mint)
        assert output["AMM_NONCE"] == str(pool.nonce)

    def test_missing_market_fails(self, env_file, capsys):
        path, _ = env_file

        assert cli.main(["--env-file", str(path), "derive"]) == 1
        assert capsys.readouterr().out == ""

    def test_invalid_market_fails(self, env_file):
        path, _ = env_file

        assert cli.main(["--env-file", str(path), "derive", "--market", "nope"]) == 1

    def test_invalid_market_names_the_flag(self, env_file, caplog):
        path, _ = env_file

        assert cli.main(["--env-file", str(path), "derive", "--market", "not-a-key"]) == 1
        assert "--market" in caplog.text

    def test_missing_env_file_fails(self, tmp_path):
        assert cli.main(["--env-file", str(tmp_path / "missing.env"), "derive"]) == 1


class TestSmoke:
    def test_rejection_is_success(self, env_file, monkeypatch, capsys):
        path, _ = env_file
        monkeypatch.setattr(ClusterConfig, "connect", lambda self: RejectingConnection())

        code = cli.main(["--env-file", str(path), "smoke"])

        assert code == 0
        assert "program responded (expected error)" in capsys.readouterr().out

    def test_missing_program_id_fails_before_network(self, tmp_path, monkeypatch):
        monkeypatch.delenv("RAYDIUM_AMM_PROGRAM_ID", raising=False)
        path = tmp_path / ".env"
        path.write_text("SOLANA_RPC_URL=http://localhost:8899\n")

        def fail(self):
            raise AssertionError("connected without configuration")

        monkeypatch.setattr(ClusterConfig, "connect", fail)

        assert cli.main(["--env-file", str(path), "smoke"]) == 1


class TestRpcFailures:
    @pytest.mark.parametrize(
        "error",
        [RPCException("Node is behind by 42 slots"), RPCNoResultException("no result")],
    )
    def test_node_error_exits_with_status_1(self, env_file, monkeypatch, caplog, error):
        path, _ = env_file
        monkeypatch.setattr(
            ClusterConfig, "connect", lambda self: UnreachableNodeConnection(error)
        )

        assert cli.main(["--env-file", str(path), "smoke"]) == 1
        assert "RPC request failed" in caplog.text
        assert str(error) in caplog.text
