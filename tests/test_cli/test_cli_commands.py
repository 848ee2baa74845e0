"""Tests for the mudmatch CLI."""

from contextlib import contextmanager
from pathlib import Path
from unittest.mock import patch

import pytest
from sqlalchemy.orm import sessionmaker
from typer.testing import CliRunner

from mudmatch.cli.main import app
from mudmatch.database.connection import make_engine
from mudmatch.database.models.objects import WorldObject

runner = CliRunner()

WORLD_YAML = """
name: Town
master_room: 2
entities:
  - {id: 0, name: Town Square, type: room}
  - {id: 2, name: Master Room, type: room}
  - {id: 1, name: Alice, type: player, location: 0}
  - {id: 3, name: Bob, type: player, location: 0}
  - {id: 4, name: red ball, type: thing, location: 1, owner: 1}
  - {id: 5, name: blue ball, type: thing, location: 0, owner: 3}
  - {id: 6, name: North;n;no, type: exit, location: 0}
  - {id: 30, name: Teleport Booth;tb, type: exit, location: 2}
"""

BRACKET_YAML = """
name: "[/x] Town"
entities:
  - {id: 0, name: Town Square, type: room}
  - {id: 1, name: Alice, type: player, location: 0}
  - {id: 2, name: "[/x] crate", type: thing, location: 0, aliases: ["[b]box"]}
"""


@pytest.fixture
def world_file(tmp_path: Path) -> Path:
    path = tmp_path / "town.yaml"
    path.write_text(WORLD_YAML)
    return path


@pytest.fixture
def bracket_file(tmp_path: Path) -> Path:
    path = tmp_path / "brackets.yaml"
    path.write_text(BRACKET_YAML)
    return path


@pytest.fixture
def temp_db(tmp_path):
    """Create a temporary SQLite database for CLI tests."""
    engine = make_engine(f"sqlite:///{tmp_path / 'test_cli.db'}")
    TestSessionLocal = sessionmaker(bind=engine)

    @contextmanager
    def mock_get_db_session():
        """Mock get_db_session that uses the test database."""
        session = TestSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    yield engine, mock_get_db_session

    engine.dispose()


class TestResolveCommand:
    """Tests for 'mudmatch resolve'."""

    def test_found(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "2nd ball", "--actor", "1"])

        assert result.exit_code == 0
        assert "found" in result.stdout
        assert "#5" in result.stdout
        assert "ordinal 2" in result.stdout

    def test_ambiguous_exits_nonzero(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "ball", "-a", "1"])

        assert result.exit_code == 1
        assert "ambiguous" in result.stdout

    def test_last(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "ball", "-a", "1", "--last"])

        assert result.exit_code == 0
        assert "#5" in result.stdout

    def test_noisy_reports_to_actor(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "ball", "-a", "1", "--noisy"])

        assert result.exit_code == 1
        assert "I don't know which one you mean!" in result.stdout

    def test_control_flag(self, world_file: Path):
        result = runner.invoke(
            app,
            ["resolve", str(world_file), "blue ball", "-a", "1", "-f", "control", "--noisy"],
        )

        assert result.exit_code == 1
        assert "Permission denied." in result.stdout

    def test_preset_and_type(self, world_file: Path):
        result = runner.invoke(
            app,
            ["resolve", str(world_file), "tb", "-a", "1", "-p", "everything", "-f", "global", "-t", "exit"],
        )

        assert result.exit_code == 0
        assert "Teleport Booth" in result.stdout

    def test_root(self, world_file: Path):
        result = runner.invoke(
            app,
            ["resolve", str(world_file), "red", "-a", "3", "-r", "1", "-p", "obj_contents"],
        )

        assert result.exit_code == 0
        assert "#4" in result.stdout

    def test_trace(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "my ball", "-a", "1", "--trace"])

        assert result.exit_code == 0
        assert "qualifiers" in result.stdout
        assert "root_contents" in result.stdout

    def test_noisy_with_root_rejected(self, world_file: Path):
        result = runner.invoke(
            app, ["resolve", str(world_file), "ball", "-a", "1", "-r", "1", "--noisy"]
        )

        assert result.exit_code == 1
        assert "--root" in result.stdout

    def test_trace_bracketed_token(self, world_file: Path):
        """Tokens that look like console markup are printed as typed."""
        result = runner.invoke(app, ["resolve", str(world_file), "[/x]", "-a", "1", "--trace"])

        assert result.exit_code == 1
        assert "[/x]" in result.stdout
        assert "not_found" in result.stdout

    def test_bracketed_entity_name(self, bracket_file: Path):
        result = runner.invoke(
            app, ["resolve", str(bracket_file), "[/x] crate", "-a", "1", "--trace"]
        )

        assert result.exit_code == 0
        assert "#2 [/x] crate" in result.stdout

    def test_unknown_preset(self, world_file: Path):
        result = runner.invoke(app, ["resolve", str(world_file), "ball", "-a", "1", "-p", "everywhere"])

        assert result.exit_code == 1
        assert "Unknown match flag or preset" in result.stdout

    def test_missing_world_file(self, tmp_path: Path):
        result = runner.invoke(app, ["resolve", str(tmp_path / "nope.yaml"), "ball", "-a", "1"])

        assert result.exit_code == 1
        assert "World file not found" in result.stdout


class TestWorldCommands:
    """Tests for 'mudmatch world'."""

    def test_inspect(self, world_file: Path):
        result = runner.invoke(app, ["world", "inspect", str(world_file)])

        assert result.exit_code == 0
        assert "Alice" in result.stdout
        assert "Teleport Booth;tb" in result.stdout

    def test_inspect_location(self, world_file: Path):
        result = runner.invoke(app, ["world", "inspect", str(world_file), "--location", "1"])

        assert result.exit_code == 0
        assert "red ball" in result.stdout
        assert "Bob" not in result.stdout

    def test_inspect_bad_file(self, tmp_path: Path):
        path = tmp_path / "world.txt"
        path.write_text("")

        result = runner.invoke(app, ["world", "inspect", str(path)])

        assert result.exit_code == 1
        assert "Unsupported file format" in result.stdout

    def test_inspect_bracketed_names(self, bracket_file: Path):
        result = runner.invoke(app, ["world", "inspect", str(bracket_file)])

        assert result.exit_code == 0
        assert "[/x] Town" in result.stdout
        assert "[/x] crate" in result.stdout
        assert "[b]box" in result.stdout

    def test_inspect_not_utf8(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_bytes(b"name: \xff\xfe\n")

        result = runner.invoke(app, ["world", "inspect", str(path)])

        assert result.exit_code == 1
        assert "Failed to parse" in result.stdout

    def test_import(self, world_file: Path, temp_db):
        engine, mock_get_db_session = temp_db

        with patch("mudmatch.cli.commands.world.get_db_session", mock_get_db_session):
            result = runner.invoke(app, ["world", "import", str(world_file)])

        assert result.exit_code == 0
        assert "Imported 8 objects (0 attributes)" in result.stdout

        session = sessionmaker(bind=engine)()
        try:
            assert session.query(WorldObject).count() == 8
        finally:
            session.close()

    def test_import_twice(self, world_file: Path, temp_db):
        """A second import of the same world is refused cleanly."""
        engine, mock_get_db_session = temp_db

        with patch("mudmatch.cli.commands.world.get_db_session", mock_get_db_session):
            first = runner.invoke(app, ["world", "import", str(world_file)])
            second = runner.invoke(app, ["world", "import", str(world_file)])

        assert first.exit_code == 0
        assert second.exit_code == 1
        assert "already in the database" in second.stdout

        session = sessionmaker(bind=engine)()
        try:
            assert session.query(WorldObject).count() == 8
        finally:
            session.close()
