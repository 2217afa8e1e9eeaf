"""Tests for CommandBus and CallbackCommandBus dispatch."""

from typing import Any, List
from unittest.mock import MagicMock

import pytest

from commands.base import CallbackCommand, Command
from commands.bus import NO_MATCH, CallbackCommandBus, CommandBus
from conftest import make_callback_update, make_update
from sdk.exceptions import TelegramSDKException


class MockCommand(Command):
    name = "mycommand"

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[List[str]] = []

    def handle(self, arguments: List[str]) -> Any:
        self.calls.append(arguments)
        return "mycommand handled"


class FailingCommand(Command):
    name = "fail"

    def handle(self, arguments: List[str]) -> Any:
        raise RuntimeError("handler exploded")


class VoteCallback(CallbackCommand):
    name = "vote"

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[List[str]] = []

    def handle(self, arguments: List[str]) -> Any:
        self.calls.append(arguments)
        return f"voted {' '.join(arguments)}"


@pytest.fixture()
def command_bus(telegram) -> CommandBus:
    return telegram.command_bus


@pytest.fixture()
def callback_bus(telegram) -> CallbackCommandBus:
    return telegram.callback_bus


# ── CommandBus.execute ───────────────────────────────────────────────────────


class TestCommandExecute:
    """Validate lookup and invocation by name."""

    def test_returns_handle_result(self, command_bus) -> None:
        command_bus.add_command(MockCommand())
        result = command_bus.execute("mycommand", [], make_update("/mycommand"))
        assert result == "mycommand handled"

    def test_unknown_command_returns_no_match(self, command_bus) -> None:
        result = command_bus.execute("nonexistent", ["arg"], make_update("/nonexistent arg"))
        assert result is NO_MATCH
        assert not result
        assert result.value == "ok"

    def test_make_receives_telegram_and_update(self, command_bus, telegram) -> None:
        command = MockCommand()
        command_bus.add_command(command)
        update = make_update("/mycommand a b")

        command_bus.execute("mycommand", ["a", "b"], update)

        assert command.telegram is telegram
        assert command.update is update
        assert command.arguments == ["a", "b"]


# ── CommandBus.handler ───────────────────────────────────────────────────────


class TestCommandHandler:
    """Validate end-to-end text dispatch."""

    def test_dispatches_with_tokenised_arguments(self, command_bus) -> None:
        command = MockCommand()
        command_bus.add_command(command)

        update = make_update("/mycommand arg1 arg2")
        result = command_bus.handler("/mycommand arg1 arg2", update)

        assert result is update
        assert command.calls == [["arg1", "arg2"]]

    def test_command_name_is_lowercased(self, command_bus) -> None:
        command = MockCommand()
        command_bus.add_command(command)

        command_bus.handler("/MYCOMMAND", make_update("/MYCOMMAND"))
        command_bus.handler("/MyCommand x", make_update("/MyCommand x"))

        assert command.calls == [[], ["x"]]

    def test_bot_name_suffix_is_stripped(self, command_bus) -> None:
        command = MockCommand()
        command_bus.add_command(command)

        command_bus.handler("/mycommand@somebot go", make_update("/mycommand@somebot go"))

        assert command.calls == [["go"]]

    def test_unknown_command_is_ignored(self, command_bus) -> None:
        update = make_update("/nonexistent arg")
        assert command_bus.handler("/nonexistent arg", update) is update

    def test_text_without_leading_command_is_ignored(self, command_bus) -> None:
        command = MockCommand()
        command_bus.add_command(command)

        update = make_update("hello /mycommand world")
        assert command_bus.handler("hello /mycommand world", update) is update
        assert command.calls == []

    def test_handler_exception_propagates(self, command_bus) -> None:
        command_bus.add_command(FailingCommand)
        with pytest.raises(RuntimeError, match="handler exploded"):
            command_bus.handler("/fail", make_update("/fail"))

    def test_handler_instance_is_reused(self, command_bus) -> None:
        command_bus.add_command(MockCommand)
        command_bus.handler("/mycommand 1", make_update("/mycommand 1"))
        command_bus.handler("/mycommand 2", make_update("/mycommand 2"))

        command = command_bus.get_commands()["mycommand"]
        assert command.calls == [["1"], ["2"]]
        assert command.arguments == ["2"]


class TestCommandBusRegistration:
    """Validate the bus-level registration helpers."""

    def test_add_and_remove(self, command_bus) -> None:
        command_bus.add_commands([MockCommand, FailingCommand])
        command_bus.remove_command("fail")
        assert list(command_bus.get_commands()) == ["mycommand"]

        command_bus.remove_commands(["mycommand", "missing"])
        assert command_bus.get_commands() == {}

    def test_to_bot_commands(self, command_bus) -> None:
        class DescribedCommand(MockCommand):
            name = "described"
            description = "Does things"

        command_bus.add_commands([MockCommand, DescribedCommand])
        menu = {item.command: item.description for item in command_bus.to_bot_commands()}

        assert menu == {"mycommand": "mycommand", "described": "Does things"}

    def test_container_from_api_is_used(self) -> None:
        telegram = MagicMock()
        telegram.container.make.return_value = MockCommand()
        bus = CommandBus(telegram)

        bus.add_command(MockCommand)

        telegram.container.make.assert_called_once_with(MockCommand)


# ── CallbackCommandBus ───────────────────────────────────────────────────────


class TestCallbackBus:
    """Validate callback data dispatch."""

    def test_dispatches_arguments(self, callback_bus) -> None:
        handler = VoteCallback()
        callback_bus.add_callback_command(handler)

        update = make_callback_update("vote 3 yes")
        result = callback_bus.handler("vote 3 yes", update)

        assert result is update
        assert handler.calls == [["3", "yes"]]

    def test_sets_callback_query_context(self, callback_bus) -> None:
        handler = VoteCallback()
        callback_bus.add_callback_command(handler)

        update = make_callback_update("vote 1", cb_id="cb-42")
        callback_bus.handler("vote 1", update)

        assert handler.callback_query_id == "cb-42"
        assert handler.callback_query is update.callback_query
        assert handler.update is update

    def test_command_is_lowercased(self, callback_bus) -> None:
        handler = VoteCallback()
        callback_bus.add_callback_command(handler)

        callback_bus.handler("VOTE up", make_callback_update("VOTE up"))

        assert handler.calls == [["up"]]

    def test_execute_returns_handle_result(self, callback_bus) -> None:
        callback_bus.add_callback_command(VoteCallback)
        update = make_callback_update("vote 5")
        result = callback_bus.execute("vote", ["5"], update, update.callback_query)
        assert result == "voted 5"

    def test_update_without_callback_query(self, callback_bus) -> None:
        handler = VoteCallback()
        callback_bus.add_callback_command(handler)

        callback_bus.handler("vote 1", make_update("hi"))

        assert handler.calls == [["1"]]
        assert handler.callback_query is None
        assert handler.callback_query_id is None
        with pytest.raises(TelegramSDKException):
            handler.answer("thanks")

    def test_unknown_and_empty_data_return_no_match(self, callback_bus) -> None:
        update = make_callback_update("other")
        assert callback_bus.execute("other", [], update, update.callback_query) is NO_MATCH
        assert callback_bus.execute("", [], update, update.callback_query) is NO_MATCH
        assert callback_bus.handler("", update) is update

    def test_add_and_remove(self, callback_bus) -> None:
        callback_bus.add_callback_commands([VoteCallback])
        assert "vote" in callback_bus.get_commands()
        callback_bus.remove_command("vote")
        callback_bus.remove_command("vote")
        assert callback_bus.get_commands() == {}
