"""Tests for the wfc2d command line."""

import pytest

from wfc2d.main import EXIT_FAILED, EXIT_SOLVED, EXIT_USAGE, main
from wfc2d.rules import parse_rules


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Run each CLI test in an empty directory with no wfc2d env settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WFC2D_SEED", raising=False)
    monkeypatch.delenv("WFC2D_CONFIG", raising=False)


def run_cli(*args: str) -> int:
    return main(["--data", "logs", *args])


class TestMain:
    """Test CLI runs and exit codes."""

    def test_plain_run(self, capsys):
        code = run_cli("--rows", "3", "--cols", "4", "--plain")
        out, err = capsys.readouterr()
        assert code == EXIT_SOLVED
        assert out == "≈≈≈≈\n≈≈≈≈\n≈≈≈≈\n"
        assert "SOLVED" in err

    def test_seeded_run(self, capsys):
        code = run_cli("--rows", "5", "--cols", "5", "--seed", "3", "--plain", "--backtracks", "20")
        out, _ = capsys.readouterr()
        assert code in (EXIT_SOLVED, EXIT_FAILED)
        assert len(out.splitlines()) == 5

    def test_rich_run(self, capsys):
        assert run_cli("--rows", "2", "--cols", "2") == EXIT_SOLVED
        out, _ = capsys.readouterr()
        assert "≈" in out

    def test_log_file_written(self, tmp_path, capsys):
        run_cli("--rows", "2", "--cols", "2", "--plain")
        assert (tmp_path / "logs" / "wfc2d.log").exists()

    def test_dump_rules(self, capsys):
        assert run_cli("--dump-rules") == EXIT_SOLVED
        out, _ = capsys.readouterr()
        assert [tile.id for tile in parse_rules(out)] == list(range(7))

    def test_custom_rules(self, tmp_path, capsys):
        rules = tmp_path / "one.rules"
        rules.write_text("[TILE_0]\nup=0\ndown=0\nleft=0\nright=0\n")
        assert run_cli("--rules", str(rules), "--rows", "2", "--cols", "3", "--plain") == EXIT_SOLVED
        out, _ = capsys.readouterr()
        assert out == "000\n000\n"

    def test_contradiction_exit_code(self, tmp_path, capsys):
        rules = tmp_path / "stuck.rules"
        rules.write_text("[TILE_0]\nup=0\ndown=0\n\n[TILE_1]\nup=1\ndown=1\n")
        code = run_cli("--rules", str(rules), "--rows", "1", "--cols", "2", "--plain")
        out, err = capsys.readouterr()
        assert code == EXIT_FAILED
        assert out == "0?\n"
        assert "Contradiction at cell 1" in err

    def test_mode_override(self, tmp_path, capsys):
        rules = tmp_path / "chain.rules"
        rules.write_text(
            "[TILE_0]\nleft=0 1\nright=0 1\n\n"
            "[TILE_1]\nleft=0 1 2\nright=0 1 2\n\n"
            "[TILE_2]\nleft=1 2\nright=1 2\n"
        )
        code = run_cli("--rules", str(rules), "--rows", "1", "--cols", "3",
                       "--mode", "supported", "--plain")
        out, _ = capsys.readouterr()
        assert code == EXIT_SOLVED
        assert out == "110\n"

    def test_invalid_dimensions(self, capsys):
        assert run_cli("--rows", "0") == EXIT_USAGE
        _, err = capsys.readouterr()
        assert "Invalid grid dimensions" in err

    def test_missing_rules_file(self, tmp_path, capsys):
        assert run_cli("--rules", str(tmp_path / "missing.rules")) == EXIT_USAGE

    def test_empty_rules_file(self, tmp_path, capsys):
        rules = tmp_path / "empty.rules"
        rules.write_text("# nothing\n")
        assert run_cli("--rules", str(rules)) == EXIT_USAGE

    def test_invalid_config(self, tmp_path, capsys):
        config = tmp_path / "bad.yaml"
        config.write_text("solver:\n  max_backtracks: -1\n")
        assert run_cli("--config", str(config)) == EXIT_USAGE
        _, err = capsys.readouterr()
        assert "Invalid config" in err

    def test_seed_from_environment(self, monkeypatch, capsys):
        monkeypatch.setenv("WFC2D_SEED", "4")
        first = run_cli("--rows", "4", "--cols", "4", "--plain", "--backtracks", "20")
        first_out, _ = capsys.readouterr()
        second = run_cli("--rows", "4", "--cols", "4", "--plain", "--backtracks", "20", "--seed", "4")
        second_out, _ = capsys.readouterr()
        assert first == second
        assert first_out == second_out
