"""End-to-end tests for prdman.cli against a temporary base directory."""

import json
import pytest

from prdman.cli import build_parser, get_base_dir, main


def record_json(record_id, priority=1, name="Record"):
    return json.dumps({
        "id": record_id,
        "priority": priority,
        "name": name,
        "description": "Desc",
        "steps": ["One"],
        "status": "todo",
    })


@pytest.fixture
def home(tmp_path):
    (tmp_path / "password").write_text("secret123\n")
    return tmp_path


def run(home, *argv):
    return main(["--home", str(home), *argv])


class TestBaseDir:
    def test_home_option_wins(self, tmp_path, monkeypatch):
        monkeypatch.setenv("PRDMAN_HOME", "/from/env")
        args = build_parser().parse_args(["--home", str(tmp_path), "list"])
        assert get_base_dir(args) == tmp_path

    def test_env_var(self, monkeypatch):
        monkeypatch.setenv("PRDMAN_HOME", "/from/env")
        args = build_parser().parse_args(["list"])
        assert str(get_base_dir(args)) == "/from/env"


class TestArgumentValidation:
    def test_rejects_bad_record_id(self, home):
        with pytest.raises(SystemExit) as exc_info:
            run(home, "details", "AUTH", "auth-1")
        assert exc_info.value.code == 2

    def test_rejects_id_with_trailing_newline(self, home):
        with pytest.raises(SystemExit) as exc_info:
            run(home, "details", "AUTH", "AUTH-0001\n")
        assert exc_info.value.code == 2

    def test_rejects_bad_status(self, home, capsys):
        run(home, "create", "AUTH", record_json("AUTH-0001"))

        assert run(home, "update-status", "AUTH", "AUTH-0001", "started") == 2
        assert "expected one of: todo, done, sent-back" in capsys.readouterr().err

    def test_lock_requires_password(self, home):
        with pytest.raises(SystemExit):
            run(home, "lock", "AUTH", "AUTH-0001")


class TestWorkflow:
    def test_full_cycle(self, home, capsys):
        assert run(home, "create", "AUTH", record_json("AUTH-0001", 2, "Later")) == 0
        assert run(home, "create", "AUTH", record_json("AUTH-0002", 1, "Sooner")) == 0
        capsys.readouterr()

        assert run(home, "list", "AUTH") == 0
        out = capsys.readouterr().out
        assert out.index("AUTH-0002") < out.index("AUTH-0001")

        assert run(home, "lock", "AUTH", "AUTH-0001", "--password", "secret123") == 0
        assert run(home, "delete", "AUTH", "--yes") == 1
        assert "Use --password to force" in capsys.readouterr().err

        assert run(home, "delete", "AUTH", "--yes", "--password", "secret123") == 0
        assert "Deleted 2 PRD(s) from feature 'AUTH'" in capsys.readouterr().out

        assert run(home, "list") == 0
        assert "No features found" in capsys.readouterr().out

    def test_data_written_to_kind_file(self, home):
        run(home, "create", "AUTH", record_json("AUTH-0001"))
        run(home, "--kind", "story", "create", "AUTH", record_json("AUTH-0009"))

        prd_data = json.loads((home / "data.json").read_text())
        story_data = json.loads((home / "stories.json").read_text())
        assert [r["id"] for r in prd_data["AUTH"]] == ["AUTH-0001"]
        assert [r["id"] for r in story_data["AUTH"]] == ["AUTH-0009"]

    def test_default_kind_from_env_file(self, home, capsys):
        (home / "prdman.env").write_text("DEFAULT_KIND=story\n")

        run(home, "create", "AUTH", record_json("AUTH-0001"))

        assert "Created story: AUTH-0001" in capsys.readouterr().out
        assert (home / "stories.json").exists()

    def test_import(self, home, tmp_path, capsys):
        path = tmp_path / "batch.json"
        path.write_text(json.dumps({
            "id": "AUTH",
            "items": [json.loads(record_json("AUTH-0001")), json.loads(record_json("AUTH-0001"))],
        }))

        assert run(home, "import", str(path)) == 0
        out = capsys.readouterr().out
        assert "Created: 1" in out
        assert "Skipped (duplicate IDs): 1" in out


class TestFatalErrors:
    def test_corrupt_store(self, home, capsys):
        (home / "data.json").write_text("{broken")

        assert run(home, "list", "AUTH") == 2
        assert "Corrupt store" in capsys.readouterr().err

    def test_store_not_utf8(self, home, capsys):
        (home / "data.json").write_bytes(b'{"AUTH": [\xff\xfe]}')

        assert run(home, "list", "AUTH") == 2
        assert "Failed to read" in capsys.readouterr().err

    def test_unreadable_password_file(self, tmp_path, capsys):
        (tmp_path / "password").mkdir()
        run(tmp_path, "create", "AUTH", record_json("AUTH-0001"))

        assert run(tmp_path, "lock", "AUTH", "AUTH-0001", "--password", "x") == 2
        assert "Failed to read password file" in capsys.readouterr().err

    def test_bad_config(self, home, capsys):
        (home / "prdman.env").write_text("nonsense\n")

        assert run(home, "list") == 2
        assert "prdman.env" in capsys.readouterr().err
