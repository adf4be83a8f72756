"""
Integration tests for the TAC command line.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from tac.cli.main import cli
from tac.cli.scenario import run_scenario
from tac.utils.logger import TACLogger


SCENARIO = {
    "owner": "owner",
    "duration": 300,
    "start_time": 1000,
    "reject": ["mallory"],
    "steps": [
        {"at": 1000, "caller": "alice", "action": "bid", "amount": 10},
        {"at": 1010, "caller": "bob", "action": "bid", "amount": 11},
        {"at": 1015, "caller": "mallory", "action": "bid", "amount": 12},
        {"at": 1020, "caller": "alice", "action": "bid", "amount": 15},
        {"at": 1021, "caller": "alice", "action": "withdraw_excess"},
        {"at": 1022, "caller": "bob", "action": "bid", "amount": 14},
        {"at": 1300, "caller": "owner", "action": "end"},
        {"at": 1900, "caller": "owner", "action": "end"},
        {"at": 1900, "caller": "bob", "action": "withdraw"},
        {"at": 1900, "caller": "mallory", "action": "withdraw"},
        {"at": 1900, "caller": "alice", "action": "withdraw"},
        {"at": 1900, "action": "winner"},
        {"at": 1900, "action": "bids"},
    ],
}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    TACLogger.reset()


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def scenario_file(tmp_path):
    path = tmp_path / "scenario.json"
    path.write_text(json.dumps(SCENARIO))
    return path


class TestScenarioRunner:
    """Tests for scenario replay without the CLI."""

    def test_results(self):
        auction, transfer, results = run_scenario(SCENARIO)
        outcome = {r.index: r for r in results}

        assert all(outcome[i].ok for i in range(5))
        assert outcome[4].result == 10
        assert not outcome[5].ok
        assert outcome[5].error.startswith("InsufficientIncrement")
        assert outcome[6].error.startswith("AuctionStillOngoing")
        assert outcome[7].result == {"winner": "alice", "amount": 15}
        assert outcome[8].result == {"refund": 11, "commission": 0}
        assert outcome[9].error.startswith("TransferFailed")
        assert outcome[10].error.startswith("WinnerCannotWithdraw")
        assert outcome[11].result == {"winner": "alice", "amount": 15}
        assert outcome[12].result == {"alice": 15, "bob": 0, "mallory": 12}

        assert transfer.balances == {"alice": 10, "bob": 11}
        assert auction.custody_balance == 15 + 12

    def test_config_override(self):
        scenario = dict(SCENARIO, config={"extension_time": 0})
        auction, _, results = run_scenario(scenario)

        # Without extension the owner can end at the original deadline
        assert results[6].ok
        assert auction.deadline == 1300

    def test_time_cannot_go_backwards(self):
        scenario = {"steps": [
            {"at": 10, "caller": "alice", "action": "bid", "amount": 1},
            {"at": 5, "caller": "bob", "action": "bid", "amount": 2},
        ]}
        with pytest.raises(ValueError):
            run_scenario(scenario)

    def test_unknown_action(self):
        with pytest.raises(ValueError, match="Unknown action"):
            run_scenario({"steps": [{"at": 0, "caller": "alice", "action": "cancel"}]})

    @pytest.mark.parametrize("scenario, message", [
        (SCENARIO["steps"], "must be a JSON object"),
        ({"steps": {"at": 0}}, "must be a list"),
        ({"steps": ["bid"]}, "Step 0 must be an object"),
        ({"config": [1], "steps": []}, "must be an object"),
    ])
    def test_malformed_shapes(self, scenario, message):
        with pytest.raises(ValueError, match=message):
            run_scenario(scenario)


class TestCLI:
    """Tests for the click commands."""

    def test_demo(self, runner):
        result = runner.invoke(cli, ["demo"])

        assert result.exit_code == 0, result.output
        assert "Winner: alice" in result.output
        assert "Demo complete" in result.output

    def test_simulate(self, runner, scenario_file):
        result = runner.invoke(cli, ["simulate", str(scenario_file)])

        assert result.exit_code == 0, result.output
        assert "✗ t=1022 bob bid: InsufficientIncrement" in result.output
        assert "alice: 10" in result.output

    def test_simulate_json(self, runner, tmp_path):
        # No declined payments, so no warnings share the output stream
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps(dict(SCENARIO, reject=[])))

        result = runner.invoke(cli, ["simulate", "--json", str(path)])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["balances"] == {"alice": 10, "bob": 11, "mallory": 12}
        assert data["stats"]["phase"] == "ENDED"
        assert len(data["steps"]) == len(SCENARIO["steps"])

    def test_invalid_scenario(self, runner, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json")

        result = runner.invoke(cli, ["simulate", str(path)])

        assert result.exit_code != 0
        assert "Invalid scenario" in result.output

    @pytest.mark.parametrize("payload", [
        [{"at": 0, "caller": "alice", "action": "bid", "amount": 10}],
        {"steps": ["bid"]},
    ])
    def test_scenario_with_wrong_shape(self, runner, tmp_path, payload):
        path = tmp_path / "shape.json"
        path.write_text(json.dumps(payload))

        result = runner.invoke(cli, ["simulate", str(path)])

        assert result.exit_code == 1
        assert not isinstance(result.exception, AttributeError)
        assert "Invalid scenario" in result.output

    def test_log_level_per_subsystem(self, runner):
        result = runner.invoke(cli, ["--log-level", "ERROR,auction=DEBUG", "config"])

        assert result.exit_code == 0, result.output
        assert logging.getLogger("tac").level == logging.ERROR
        assert logging.getLogger("tac.auction").level == logging.DEBUG

    def test_invalid_log_level(self, runner):
        result = runner.invoke(cli, ["--log-level", "chatty", "config"])

        assert result.exit_code == 2
        assert "Unknown log level" in result.output

    def test_config_file(self, runner, tmp_path):
        path = tmp_path / "auction.json"
        path.write_text(json.dumps({"commission_percent": 7}))

        result = runner.invoke(cli, ["--config", str(path), "config"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["commission_percent"] == 7

    def test_invalid_config_file(self, runner, tmp_path):
        path = tmp_path / "auction.json"
        path.write_text(json.dumps({"commission_percent": 700}))

        result = runner.invoke(cli, ["--config", str(path), "config"])

        assert result.exit_code != 0
        assert "Invalid configuration" in result.output
