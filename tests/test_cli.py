import json

import pytest

from cookbook_club import __version__
from cookbook_club.cli import build_parser, hours_list, run


@pytest.fixture(scope="function")
def cli(tmp_path, capsys):
    """Run the CLI against a temporary JSON data file and return (exit code, parsed output)."""
    data = str(tmp_path / "state.json")

    def invoke(*argv, storage="json", data_path=None):
        code = run(["--storage", storage, "--data", data_path or data, *argv])
        captured = capsys.readouterr()
        output = json.loads(captured.out) if captured.out.strip() else None
        return code, output, captured.err

    return invoke


@pytest.fixture(scope="function")
def initialized(cli):
    code, output, _ = cli("club", "init", "--name", "Sunday Supper", "--host-name", "Alice")
    assert code == 0
    return output


# ============================================================================
# ARGUMENT PARSING
# ============================================================================


def test_hours_list():
    """Test comma-separated hours parse to numbers."""
    assert hours_list("72, 24,0") == [72.0, 24.0, 0.0]


@pytest.mark.parametrize("value", ["", "72,,0", "a,b", "-1", "inf"])
def test_hours_list_rejects_invalid(value):
    """Test malformed or negative hours are usage errors."""
    parser = build_parser()
    with pytest.raises(SystemExit) as exc_info:
        parser.parse_args(["club", "set-reminders", "--actor", "user_1", "--windows", value])
    assert exc_info.value.code == 2


def test_unknown_storage_is_usage_error():
    """Test the storage flag only accepts known backends."""
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--storage", "postgres", "version"])


def test_version(cli):
    """Test the version command."""
    code, output, _ = cli("version")
    assert code == 0
    assert output == {"version": __version__}


# ============================================================================
# COMMANDS
# ============================================================================


def test_club_init_and_show(cli, initialized):
    """Test init persists the club and show reads it back."""
    assert initialized["club"]["name"] == "Sunday Supper"
    assert initialized["host"]["id"] == "user_1"

    code, output, _ = cli("club", "show")
    assert code == 0
    assert output["upcoming"]["id"] == "meetup_1"


def test_domain_error_exits_1(cli, initialized):
    """Test domain errors print a message and exit with status 1."""
    code, output, err = cli("club", "init", "--name", "Again", "--host-name", "Zed")
    assert code == 1
    assert output is None
    assert err.strip().endswith("Club already initialized.")
    assert "Error:" in err


def test_command_before_init_fails(cli):
    """Test commands that need a club fail cleanly on an empty file."""
    code, _, err = cli("meetup", "show")
    assert code == 1
    assert "Club is not initialized" in err


def test_member_and_meetup_flow(cli, initialized):
    """Test inviting, scheduling and delivering through the CLI."""
    _, bob, _ = cli("user", "add", "--name", "Bob")
    code, membership, _ = cli("member", "invite", "--actor", "user_1", "--user", bob["id"])
    assert code == 0
    assert membership["cookbookAccessFrom"] == "meetup_1"

    code, _, _ = cli(
        "club", "set-reminders", "--actor", "user_1", "--windows", "72,24,0", "--recipe-prompt-hours", "36"
    )
    assert code == 0
    code, meetup, _ = cli("meetup", "schedule", "--actor", "user_1", "--at", "2030-04-03T18:30:00Z")
    assert meetup["scheduledFor"] == "2030-04-03T18:30:00Z"

    _, pending, _ = cli("notify", "list", "--user", bob["id"])
    assert sorted(n["key"] or n["type"] for n in pending) == [
        "meetup_0h",
        "meetup_24h",
        "meetup_72h",
        "meetup_updated",
        "recipe_prompt",
    ]

    _, delivered, _ = cli("notify", "run", "--now", "2030-04-02T12:00:00Z")
    assert len(delivered) == 6
    _, pending, _ = cli("notify", "list")
    assert len(pending) == 4


def test_failed_command_creates_no_file(cli, tmp_path):
    """Test a failing command leaves no data file behind."""
    code, _, _ = cli("club", "reminder-templates", data_path=str(tmp_path / "other.json"))
    assert code == 1
    assert not (tmp_path / "other.json").exists()


def test_recipe_commands(cli, initialized, image_path):
    """Test adding and listing recipes."""
    code, recipe, _ = cli(
        "recipe", "add", "--actor", "user_1", "--title", "Roast", "--content", "Slow.", "--image", image_path
    )
    assert code == 0
    _, recipes, _ = cli("recipe", "list", "--actor", "user_1")
    assert [r["id"] for r in recipes] == [recipe["id"]]

    code, item, _ = cli(
        "cookbook", "personal-add", "--actor", "user_1", "--recipe", recipe["id"], "--collection", "Keepers"
    )
    assert code == 0
    _, collections, _ = cli("cookbook", "personal-list", "--actor", "user_1")
    assert collections[0]["name"] == "Keepers"


def test_reminder_template_export_import(cli, initialized, tmp_path):
    """Test custom templates move between data files."""
    cli("club", "add-reminder-template", "--actor", "user_1", "--name", "weekly", "--windows", "168,0")
    out = tmp_path / "templates.json"
    code, exported, _ = cli("club", "export-reminder-templates", "--out", str(out))
    assert code == 0
    assert exported["templateCount"] == 1
    document = json.loads(out.read_text(encoding="utf-8"))
    assert document["templates"]["weekly"]["meetupWindowHours"] == [168, 0]

    other = str(tmp_path / "other.json")
    cli("club", "init", "--name", "Other", "--host-name", "Zed", data_path=other)
    code, result, _ = cli(
        "club", "import-reminder-templates", "--actor", "user_1", "--in", str(out), "--prefix", "shared",
        data_path=other,
    )
    assert code == 0
    assert result["imported"] == ["shared_weekly"]
    assert result["importedFrom"] == str(out.resolve())


# ============================================================================
# DATA
# ============================================================================


def test_data_export_and_import(cli, initialized, tmp_path):
    """Test a snapshot exported from JSON imports into SQLite."""
    out = tmp_path / "export.json"
    code, exported, _ = cli("data", "export", "--out", str(out))
    assert code == 0
    assert exported["exportedTo"] == str(out.resolve())

    database = str(tmp_path / "state.sqlite")
    code, imported, _ = cli("data", "import", "--in", str(out), storage="sqlite", data_path=database)
    assert code == 0
    assert imported["activeDataFile"] == str((tmp_path / "state.sqlite").resolve())

    _, club, _ = cli("club", "show", storage="sqlite", data_path=database)
    assert club["club"]["name"] == "Sunday Supper"


def test_data_import_invalid_file(cli, tmp_path):
    """Test an invalid snapshot is refused with exit status 1."""
    source = tmp_path / "bad.json"
    source.write_text("[]", encoding="utf-8")
    code, _, err = cli("data", "import", "--in", str(source))
    assert code == 1
    assert "Invalid snapshot for import" in err


def test_data_info_json(cli, initialized):
    """Test info on JSON storage explains the missing table stats."""
    code, info, _ = cli("data", "info")
    assert code == 0
    assert info["storage"] == "json"
    assert "only available for --storage sqlite" in info["note"]


def test_data_doctor_sqlite(cli, tmp_path):
    """Test doctor on a fresh SQLite database."""
    database = str(tmp_path / "state.sqlite")
    code, report, _ = cli("data", "doctor", storage="sqlite", data_path=database)
    assert code == 0
    assert report["ok"] is True
    assert report["revision"] == "003"

    code, report, _ = cli("data", "doctor", "--repair", storage="sqlite", data_path=database)
    assert report["repaired"] is True
    assert report["repairedJsonFields"] == 0
