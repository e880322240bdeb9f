import io

import pytest
from rich.console import Console

from assistant.llm.console import ConsoleUI, pretty_arguments
from assistant.llm.schemas.chat import FunctionCall, ToolCall


@pytest.fixture
def ui():
    return ConsoleUI(Console(file=io.StringIO(), width=120))


@pytest.mark.parametrize(("answer", "approved"), [("y", True), (" Y ", True), ("yes", False), ("", False)])
@pytest.mark.asyncio
async def test_only_y_approves(monkeypatch, ui, answer, approved):
    monkeypatch.setattr(ui.console, "input", lambda prompt: answer)
    call = ToolCall(id="call-1", function=FunctionCall(name="shell_tool", arguments='{"command": "ls"}'))

    assert await ui.confirm_tool_call(call) is approved
    assert "shell_tool" in ui.console.file.getvalue()


def test_pretty_arguments_falls_back_to_raw_text():
    assert pretty_arguments('{"a": 1}') == '{\n  "a": 1\n}'
    assert pretty_arguments("{oops") == "{oops"
