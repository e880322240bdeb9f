import pytest

from assistant.core.exceptions import SerializationError, ToolExecutionError
from assistant.tools.shell import ShellTool


@pytest.mark.asyncio
async def test_execute_shell_commands_joins_trimmed_output():
    result = await ShellTool().execute(
        {
            "commands": [
                {"command": "echo", "args": ["Hello, world!"]},
                {"command": "printf", "args": ["  padded  \n\n"]},
            ]
        }
    )

    assert result == "Hello, world!\npadded"


@pytest.mark.asyncio
async def test_arguments_are_not_shell_expanded():
    result = await ShellTool().execute({"command": "echo", "args": ["$HOME", "*"]})

    assert result == "$HOME *"


@pytest.mark.asyncio
async def test_command_not_found():
    with pytest.raises(ToolExecutionError) as excinfo:
        await ShellTool().execute({"commands": [{"command": "nonexistent-cmd-xyz", "args": ["a"]}]})

    assert "Command `nonexistent-cmd-xyz` not found" in str(excinfo.value)


@pytest.mark.asyncio
async def test_non_zero_exit_reports_stderr():
    with pytest.raises(ToolExecutionError) as excinfo:
        await ShellTool().execute({"command": "sh", "args": ["-c", "echo oops >&2; exit 3"]})

    assert str(excinfo.value) == "Command `sh` failed with error: oops"


@pytest.mark.asyncio
async def test_invalid_arguments():
    with pytest.raises(SerializationError):
        await ShellTool().execute({"commands": "ls -la"})


def test_input_schema_describes_commands():
    schema = ShellTool().input_schema()

    assert "commands" in schema["properties"]
