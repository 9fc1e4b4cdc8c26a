"""
Test suite for the command-line interface.

Runs main() end to end with the chain client replaced by the fake.
"""

import pytest

from lock_submitter import __version__
from lock_submitter.chain.interface import ChainConnectionError, EstimationError, SubmissionError
from lock_submitter.cli import create_parser, main
from tests.conftest import ONE_ETHER, WALLET_ADDRESS, FakeChainClient


@pytest.fixture
def install_client(monkeypatch):
    """Replace the web3 client used by the submitter with a given fake."""
    def _install(client: FakeChainClient) -> FakeChainClient:
        monkeypatch.setattr(
            "lock_submitter.core.submitter.Web3ChainClient",
            lambda config: client,
        )
        return client
    return _install


class TestParser:
    """Tests for argument parsing."""

    def test_command_defaults_to_none(self):
        args = create_parser().parse_args([])

        assert args.command is None
        assert args.env_file == ".env"

    def test_options_before_command(self):
        args = create_parser().parse_args(["--log-level", "DEBUG", "--receipt-timeout", "30", "check"])

        assert args.command == "check"
        assert args.log_level == "DEBUG"
        assert args.receipt_timeout == 30.0

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """End-to-end runs of the entry point."""

    def test_sufficient_funds_submits(self, submitter_env, install_client, capsys):
        client = install_client(FakeChainClient(
            balances={WALLET_ADDRESS: 999_999_999_999_999_999_999},
            gas_estimate=21000,
            gas_price=50,
        ))

        code = main(["--env-file", ""])

        assert code == 0
        assert len(client.submitted) == 1
        call = client.submitted[0][0]
        assert call.value == ONE_ETHER
        assert call.args[2] == ONE_ETHER
        assert call.args[3] == 7
        assert "Status: Success" in capsys.readouterr().out

    def test_insufficient_funds_exits_zero(self, submitter_env, install_client, capsys):
        client = install_client(FakeChainClient(
            balances={WALLET_ADDRESS: 500_000_000_000_000_000},
        ))

        code = main(["--env-file", "", "submit"])

        assert code == 0
        assert client.submitted == []
        assert "INSUFFICIENT FUNDS" in capsys.readouterr().out

    def test_estimation_failure_exits_three(self, submitter_env, install_client):
        client = install_client(FakeChainClient(
            balances={WALLET_ADDRESS: 10 * ONE_ETHER},
            estimate_error=EstimationError("execution reverted"),
        ))

        assert main(["--env-file", ""]) == 3
        assert client.submitted == []
        assert client.receipt_requests == []

    def test_missing_receipt_exits_zero(self, submitter_env, install_client, capsys):
        install_client(FakeChainClient(
            balances={WALLET_ADDRESS: 10 * ONE_ETHER},
            mined=False,
        ))

        assert main(["--env-file", ""]) == 0
        assert "receipt not found" in capsys.readouterr().out

    def test_check_does_not_submit(self, submitter_env, install_client):
        client = install_client(FakeChainClient(balances={WALLET_ADDRESS: 10 * ONE_ETHER}))

        assert main(["--env-file", "", "check"]) == 0
        assert client.submitted == []

    def test_config_error_exits_one(self, submitter_env, monkeypatch, install_client, capsys):
        client = install_client(FakeChainClient())
        monkeypatch.delenv("SIGNATURE")

        code = main(["--env-file", ""])

        assert code == 1
        assert "SIGNATURE" in capsys.readouterr().err
        assert client.calls == []

    def test_submission_error_exits_one(self, submitter_env, install_client, capsys):
        install_client(FakeChainClient(
            balances={WALLET_ADDRESS: 10 * ONE_ETHER},
            submit_error=SubmissionError("nonce too low"),
        ))

        assert main(["--env-file", ""]) == 1
        assert "nonce too low" in capsys.readouterr().err

    def test_connection_error_exits_one(self, submitter_env, install_client):
        client = install_client(FakeChainClient())

        async def fail_connect():
            raise ChainConnectionError("RPC endpoint unreachable")

        client.connect = fail_connect

        assert main(["--env-file", ""]) == 1
