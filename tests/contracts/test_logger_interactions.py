"""
Contract tests for the sample loggers' interactions.

Why this file exists:
- Sample tests verify behavior with targeted assertions.
- Contract tests replay every scenario of one shared contract file and
  check the exact, ordered calls each logger makes on its collaborators.

These tests intentionally keep helpers small and explicit for learning.
"""

from __future__ import annotations

from email.message import EmailMessage
from functools import lru_cache
from pathlib import Path
from typing import Any

import pytest

from samples import ILogMailer, ILogWriter, Logger, SmartLogger
from understudy import It, Mock, MockBehavior, Times, UnmatchedCallError

yaml = pytest.importorskip("yaml", reason="Install pyyaml for contract tests.")

pytestmark = pytest.mark.contract

# Placeholder in the contract for the message returned by create_message
CREATED_MESSAGE = "$created_message"


def _contract_path() -> Path:
    """Return the interaction contract file path."""
    return Path(__file__).resolve().parents[2] / "contracts" / "logger_interactions.yaml"


@lru_cache(maxsize=1)
def _load_contract() -> dict[str, Any]:
    """Load the raw contract document from disk."""
    with _contract_path().open("r", encoding="utf-8") as contract_file:
        return yaml.safe_load(contract_file)


def _scenario_ids() -> list[str]:
    return [scenario["name"] for scenario in _load_contract()["scenarios"]]


def _scenario(name: str) -> dict[str, Any]:
    return next(s for s in _load_contract()["scenarios"] if s["name"] == name)


def _collaborators(created: EmailMessage) -> tuple[Mock, Mock, list[tuple[str, str, list[Any]]]]:
    """
    Create strict writer and mailer mocks that log every call into one list.

    Strict behavior makes any call the contract does not allow fail at once.
    """
    calls: list[tuple[str, str, list[Any]]] = []

    writer = Mock(ILogWriter, MockBehavior.STRICT)
    writer.setup(lambda lw: lw.write(It.is_any(str))).callback(
        lambda message: calls.append(("writer", "write", [message]))
    )

    mailer = Mock(ILogMailer, MockBehavior.STRICT)
    mailer.setup(lambda lm: lm.create_message(It.is_any(str))).returns(created).callback(
        lambda body: calls.append(("mailer", "create_message", [body]))
    )
    mailer.setup(lambda lm: lm.send(It.is_any())).callback(
        lambda message: calls.append(("mailer", "send", [message]))
    )
    return writer, mailer, calls


def _expected_calls(scenario: dict[str, Any], created: EmailMessage) -> list[tuple[str, str, list[Any]]]:
    """Resolve the contract's placeholders into concrete expected calls."""
    expected = []
    for entry in scenario["calls"]:
        arguments = [created if a == CREATED_MESSAGE else a for a in entry["arguments"]]
        expected.append((entry["collaborator"], entry["member"], arguments))
    return expected


def test_contract_document_has_expected_shape():
    """Validate the contract file before replaying it."""
    contract = _load_contract()

    assert contract["version"] == 1
    assert contract["scenarios"], "contract declares no scenarios"
    for scenario in contract["scenarios"]:
        assert scenario["logger"] in {"Logger", "SmartLogger"}
        assert isinstance(scenario["line"], str)
        for entry in scenario["calls"]:
            assert entry["collaborator"] in {"writer", "mailer"}
            assert isinstance(entry["arguments"], list)


@pytest.mark.parametrize("name", _scenario_ids())
def test_logger_makes_contracted_calls_in_order(name, mail_message):
    """Replay one scenario and compare the recorded calls with the contract."""
    # Arrange
    scenario = _scenario(name)
    writer, mailer, calls = _collaborators(mail_message)
    if scenario["logger"] == "SmartLogger":
        sut = SmartLogger(writer.object, mailer.object)
    else:
        sut = Logger(writer.object)

    # Act
    sut.write_line(scenario["line"])

    # Assert
    assert calls == _expected_calls(scenario, mail_message)


@pytest.mark.parametrize("name", _scenario_ids())
def test_each_contracted_call_happens_exactly_once(name, mail_message):
    """Cross-check the ordered log with per-member verification."""
    # Arrange
    scenario = _scenario(name)
    writer, mailer, _ = _collaborators(mail_message)
    mocks = {"writer": writer, "mailer": mailer}
    if scenario["logger"] == "SmartLogger":
        sut = SmartLogger(writer.object, mailer.object)
    else:
        sut = Logger(writer.object)

    # Act
    sut.write_line(scenario["line"])

    # Assert
    for collaborator, member, arguments in _expected_calls(scenario, mail_message):
        matchers = [It.is_same(a) if isinstance(a, EmailMessage) else a for a in arguments]
        mocks[collaborator].verify(
            lambda fake: getattr(fake, member)(*matchers),
            Times.once(),
        )
    for mock in mocks.values():
        mock.verify_no_other_calls()


def test_strict_collaborator_rejects_call_outside_contract(mail_message):
    """A logger that made an extra call would break the contract immediately."""
    # Arrange
    writer, _, _ = _collaborators(mail_message)

    # Act / Assert
    with pytest.raises(UnmatchedCallError, match="set_logger"):
        writer.object.set_logger("elsewhere")
