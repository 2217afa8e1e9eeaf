"""Tests for the Command / CallbackCommand base classes and handler contracts."""

from typing import Any, List
from unittest.mock import MagicMock

import pytest

from commands.base import CallbackCommand, CallbackCommandInterface, Command, CommandInterface
from commands.bus import CommandBus
from conftest import make_callback_update, make_update
from sdk.exceptions import TelegramSDKException


class EchoCommand(Command):
    name = "echo"
    description = "Echo the arguments back"

    def handle(self, arguments: List[str]) -> Any:
        return self.reply_with_message(" ".join(arguments))


class RelayCommand(Command):
    name = "relay"

    def handle(self, arguments: List[str]) -> Any:
        return self.trigger_command("ECHO")


class AckCallback(CallbackCommand):
    name = "ack"

    def handle(self, arguments: List[str]) -> Any:
        return self.answer("Done", show_alert=True)


# ── contracts ────────────────────────────────────────────────────────────────


class TestContracts:
    """Validate runtime-checkable protocol membership."""

    def test_command_satisfies_text_contract(self) -> None:
        assert isinstance(EchoCommand(), CommandInterface)

    def test_callback_satisfies_callback_contract(self) -> None:
        assert isinstance(AckCallback(), CallbackCommandInterface)

    def test_text_command_is_not_a_callback_command(self) -> None:
        assert not isinstance(EchoCommand(), CallbackCommandInterface)

    def test_plain_object_satisfies_neither(self) -> None:
        assert not isinstance(object(), CommandInterface)
        assert not isinstance(object(), CallbackCommandInterface)

    def test_base_classes_are_abstract(self) -> None:
        with pytest.raises(TypeError):
            Command()  # type: ignore[abstract]
        with pytest.raises(TypeError):
            CallbackCommand()  # type: ignore[abstract]


# ── Command ──────────────────────────────────────────────────────────────────


class TestCommand:
    """Validate context storage and reply helpers."""

    def test_make_returns_handle_result(self) -> None:
        telegram = MagicMock()
        telegram.send_message.return_value = "sent"

        result = EchoCommand().make(telegram, ["hello", "there"], make_update("/echo hello there"))

        assert result == "sent"
        telegram.send_message.assert_called_once_with(chat_id=1000, text="hello there")

    def test_reply_targets_callback_message_chat(self) -> None:
        telegram = MagicMock()
        command = EchoCommand()
        command.make(telegram, ["x"], make_callback_update("echo x", chat_id=555))
        telegram.send_message.assert_called_once_with(chat_id=555, text="x")

    def test_reply_before_invocation_raises(self) -> None:
        with pytest.raises(TelegramSDKException):
            EchoCommand().reply_with_message("too early")

    def test_trigger_command_runs_other_command(self, telegram) -> None:
        echo = EchoCommand()
        telegram.add_commands([echo, RelayCommand])
        telegram.send_message = MagicMock(return_value="echoed")

        result = telegram.command_bus.handler("/relay a b", make_update("/relay a b"))

        telegram.send_message.assert_called_once_with(chat_id=1000, text="a b")
        assert echo.arguments == ["a", "b"]
        assert result.update_id == 1

    def test_trigger_command_with_explicit_arguments(self) -> None:
        telegram = MagicMock()
        telegram.command_bus = CommandBus(telegram)
        echo = EchoCommand()
        telegram.command_bus.add_command(echo)

        relay = RelayCommand()
        relay.make(telegram, ["ignored"], make_update("/relay ignored"))
        relay.trigger_command("echo", ["custom"])

        assert echo.arguments == ["custom"]

    def test_to_bot_command(self) -> None:
        bot_command = EchoCommand().to_bot_command()
        assert bot_command.command == "echo"
        assert bot_command.description == "Echo the arguments back"


# ── CallbackCommand ──────────────────────────────────────────────────────────


class TestCallbackCommand:
    """Validate callback context and answer helper."""

    def test_answer_uses_callback_query_id(self) -> None:
        telegram = MagicMock()
        telegram.answer_callback_query.return_value = True
        update = make_callback_update("ack", cb_id="cb-9")

        result = AckCallback().make(telegram, [], update, update.callback_query)

        assert result is True
        telegram.answer_callback_query.assert_called_once_with("cb-9", text="Done", show_alert=True)

    def test_answer_before_invocation_raises(self) -> None:
        with pytest.raises(TelegramSDKException):
            AckCallback().answer()
