import pytest

from assistant.core.exceptions import ToolExecutionError
from assistant.tools.snapshot import SnapshotTool


@pytest.fixture
def project(tmp_path):
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "demo"\n')
    package = tmp_path / "demo"
    (package / "sub").mkdir(parents=True)
    (package / "b.py").write_text("B = 2\n")
    (package / "a.py").write_text("A = 1\n")
    (package / "sub" / "c.py").write_text("C = 3\n")
    (package / "notes.txt").write_text("ignored")
    return tmp_path


@pytest.mark.asyncio
async def test_snapshot_lists_manifest_then_sorted_sources(project):
    state_file = project / "state.txt"
    tool = SnapshotTool(project, sources=["demo"], state_file=state_file)

    snapshot = await tool.execute({})

    assert snapshot == (
        'File: pyproject.toml\n[project]\nname = "demo"\n\n\n'
        "File: demo/a.py\nA = 1\n\n\n"
        "File: demo/b.py\nB = 2\n\n\n"
        "File: demo/sub/c.py\nC = 3\n\n\n"
    )
    assert "notes.txt" not in snapshot
    assert state_file.read_text() == snapshot


@pytest.mark.asyncio
async def test_missing_manifest_is_an_execution_error(project):
    (project / "pyproject.toml").unlink()
    tool = SnapshotTool(project, sources=["demo"], state_file=project / "state.txt")

    with pytest.raises(ToolExecutionError, match="Error reading file"):
        await tool.execute(None)
