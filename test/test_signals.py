from __future__ import annotations
import signal
from unittest import mock
import pytest
from hlerr._signals import SIGNAL_NAMES, SigIntHandler, signal_name


@pytest.mark.parametrize(
    "name", ["SIGHUP", "SIGINT", "SIGKILL", "SIGSEGV", "SIGTERM", "SIGUSR1"]
)
def test_signal_name_known(name: str) -> None:
    assert signal_name(getattr(signal, name)) == name


def test_signal_name_unknown() -> None:
    assert signal_name(0) is None
    assert signal_name(200) is None


def test_signal_names_is_immutable() -> None:
    with pytest.raises(TypeError):
        SIGNAL_NAMES[1] = "SIGFOO"  # type: ignore[index]


@mock.patch("hlerr._signals.os._exit")
@mock.patch("hlerr._signals.os.kill")
def test_sigint_escalation(mock_kill: mock.MagicMock, mock_exit: mock.MagicMock) -> None:
    handler = SigIntHandler(1234)
    handler(signal.SIGINT, None)
    handler(signal.SIGINT, None)
    assert mock_kill.call_args_list == [
        mock.call(1234, signal.SIGINT),
        mock.call(1234, signal.SIGINT),
    ]
    handler(signal.SIGINT, None)
    mock_kill.assert_called_with(1234, signal.SIGKILL)
    mock_exit.assert_not_called()
    handler(signal.SIGINT, None)
    mock_exit.assert_called_once_with(1)


@mock.patch("hlerr._signals.os.kill", side_effect=ProcessLookupError)
def test_sigint_after_child_is_gone(mock_kill: mock.MagicMock) -> None:
    handler = SigIntHandler(1234)
    handler(signal.SIGINT, None)
    assert handler.sigcount == 1
