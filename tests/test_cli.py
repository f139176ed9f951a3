"""Tests for the command line interface."""

from typer.testing import CliRunner

from deliframes import __version__
from deliframes.cli import app

runner = CliRunner()


class TestUsage:
    def test_no_arguments(self):
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "usage: deliframes" in result.output

    def test_too_many_arguments(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / n) for n in ("a.avi", "b.avi", "c.avi")])
        assert result.exit_code == 1
        assert "usage: deliframes" in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_help_warns_about_no_keep_first(self):
        result = runner.invoke(app, ["--help"], env={"COLUMNS": "200"})
        assert result.exit_code == 0
        assert "decode" in result.output


class TestInPlace:
    def test_patches_file(self, write_avi):
        path, built = write_avi()
        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 0, result.output
        assert "Patched 2 key frames" in result.output
        after = path.read_bytes()
        second = built.chunk_positions[2]
        assert after[second : second + 4] == b"JUNK"

    def test_second_run_reports_already_patched(self, write_avi):
        path, _ = write_avi()
        runner.invoke(app, [str(path)])
        once = path.read_bytes()
        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 0, result.output
        assert "Patched 0 key frames (2 already patched)" in result.output
        assert path.read_bytes() == once

    def test_atomic(self, write_avi):
        path, built = write_avi()
        result = runner.invoke(app, ["--atomic", str(path)])

        assert result.exit_code == 0, result.output
        assert path.read_bytes() != built.data

    def test_verbose(self, write_avi):
        path, _ = write_avi()
        result = runner.invoke(app, ["-v", str(path)])
        assert result.exit_code == 0, result.output
        assert "relative" in result.output

    def test_invalid_file(self, tmp_path):
        path = tmp_path / "bad.avi"
        path.write_bytes(b"RIFX" + b"\x00" * 20)
        result = runner.invoke(app, [str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "missing.avi")])
        assert result.exit_code == 1
        assert "Error" in result.output

    def test_missing_movi(self, write_avi):
        path, built = write_avi(include_movi=False)
        result = runner.invoke(app, [str(path)])
        assert result.exit_code == 1
        assert path.read_bytes() == built.data


class TestCopy:
    def test_copy(self, write_avi, tmp_path):
        source, built = write_avi()
        target = tmp_path / "out.avi"
        result = runner.invoke(app, [str(source), str(target)])

        assert result.exit_code == 0, result.output
        assert source.read_bytes() == built.data
        assert len(target.read_bytes()) == len(built.data)
        assert target.read_bytes() != built.data

    def test_atomic_rejected(self, write_avi, tmp_path):
        source, _ = write_avi()
        result = runner.invoke(app, ["--atomic", str(source), str(tmp_path / "out.avi")])
        assert result.exit_code == 1
        assert not (tmp_path / "out.avi").exists()


class TestReporting:
    def test_dry_run(self, write_avi):
        path, built = write_avi()
        result = runner.invoke(app, ["--dry-run", str(path)])

        assert result.exit_code == 0, result.output
        assert "Would patch 2 key frames" in result.output
        assert path.read_bytes() == built.data

    def test_info(self, write_avi):
        path, built = write_avi()
        result = runner.invoke(app, ["--info", str(path)])

        assert result.exit_code == 0, result.output
        assert "Key frames: 3" in result.output
        assert path.read_bytes() == built.data

    def test_config_file(self, write_avi, tmp_path):
        path, built = write_avi()
        settings = tmp_path / "settings.yaml"
        settings.write_text("keep_first: false\n")
        result = runner.invoke(app, ["--config", str(settings), str(path)])

        assert result.exit_code == 0, result.output
        first = built.chunk_positions[0]
        assert path.read_bytes()[first : first + 4] == b"JUNK"

    def test_bad_offsets_option(self, write_avi):
        path, built = write_avi()
        result = runner.invoke(app, ["--offsets", "sideways", str(path)])
        assert result.exit_code == 1
        assert path.read_bytes() == built.data

    def test_malformed_config_file(self, write_avi, tmp_path):
        path, built = write_avi()
        settings = tmp_path / "settings.yaml"
        settings.write_text("keep_first: [unclosed\n")
        result = runner.invoke(app, ["--config", str(settings), str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert "Invalid config format" in result.output
        assert path.read_bytes() == built.data
