"""Tests for launching svnversion and capturing its output."""

import logging
import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from svnrev_core.errors import MissingInputError, ToolExecutionError, ToolLaunchError
from svnrev_core.vcs.base import RevisionQuery
from svnrev_core.vcs.invoker import NO_NEWLINE_FLAG, OutputBuffer, SvnversionInvoker, split_lines
from svnrev_core.vcs.parser import parse_output
from svnrev_core.vcs.resolver import default_executable_name, resolve_executable

INVOKER_LOGGER = "svnrev_core.vcs.invoker"

posix_only = pytest.mark.skipif(os.name == "nt", reason="fake svnversion is a POSIX shell script")


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestResolver:
    def test_bare_name_without_install_root(self) -> None:
        assert resolve_executable() == default_executable_name()
        assert resolve_executable("", "svnversion") == "svnversion"

    def test_joins_install_root_and_name(self, tmp_path: Path) -> None:
        assert resolve_executable(tmp_path, "svnversion") == str(tmp_path / "svnversion")

    def test_blank_executable_uses_platform_default(self, tmp_path: Path) -> None:
        assert resolve_executable(tmp_path, "  ") == str(tmp_path / default_executable_name())

    def test_platform_default(self) -> None:
        expected = "svnversion.exe" if os.name == "nt" else "svnversion"
        assert default_executable_name() == expected


class TestRevisionQuery:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_missing_path_rejected(self, value) -> None:
        with pytest.raises(MissingInputError):
            RevisionQuery.from_path(value)

    def test_nul_in_path_rejected(self) -> None:
        with pytest.raises(MissingInputError, match="NUL"):
            RevisionQuery.from_path("wc\x00copy")

    def test_missing_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RevisionQuery.from_path("")

    def test_absolute_path_resolves_relative(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        query = RevisionQuery.from_path(".")
        assert query.absolute_path() == tmp_path.resolve()


class TestOutputBuffer:
    def test_lines_join_without_separators(self) -> None:
        buffer = OutputBuffer()
        for line in ["4168", ":", "4173MS"]:
            buffer.append(line)
        assert len(buffer) == 3
        assert buffer.snapshot() == "4168:4173MS"

    def test_empty_buffer(self) -> None:
        assert OutputBuffer().snapshot() == ""


class TestCommandLine:
    def test_command_shape(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(install_root=tmp_path / "bin", executable="svnversion")
        query = RevisionQuery.from_path(tmp_path)
        assert invoker.build_command(query) == [
            str(tmp_path / "bin" / "svnversion"),
            NO_NEWLINE_FLAG,
            str(tmp_path.resolve()),
        ]

    def test_command_line_string(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        query = RevisionQuery.from_path(tmp_path)
        assert invoker.command_line(query) == f"svnversion --no-newline {tmp_path.resolve()}"


class TestRunWithMockedProcess:
    def test_returns_concatenated_stdout(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with patch("subprocess.run", return_value=_completed(stdout="4168:4173\nMS\n")) as run:
            output = invoker.run(RevisionQuery.from_path(tmp_path))
        assert output == "4168:4173MS"
        args, kwargs = run.call_args
        assert args[0][1] == "--no-newline"
        assert kwargs["capture_output"] is True
        assert kwargs["errors"] == "replace"

    def test_logs_each_stdout_line_at_info(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with caplog.at_level(logging.DEBUG, logger=INVOKER_LOGGER):
            with patch("subprocess.run", return_value=_completed(stdout="4168:4173\nMS\n")):
                invoker.run(RevisionQuery.from_path(tmp_path))
        info_messages = [r.getMessage() for r in caplog.records if r.levelno == logging.INFO]
        assert info_messages == ["4168:4173", "MS"]

    def test_only_cr_and_lf_split_lines(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with patch("subprocess.run", return_value=_completed(stdout="12\x0c34\r\n")):
            output = invoker.run(RevisionQuery.from_path(tmp_path))
        assert output == "12\x0c34"
        summary = parse_output(output)
        assert summary.low_revision == 12
        assert summary.high_revision == 34

    @pytest.mark.parametrize("text,expected", [
        ("", []),
        ("4168", ["4168"]),
        ("4168\r\nM\rS\n", ["4168", "M", "S"]),
        ("a\x0bb\x1cc\x85d e", ["a\x0bb\x1cc\x85d e"]),
    ])
    def test_split_lines(self, text: str, expected: list) -> None:
        assert split_lines(text) == expected

    def test_no_output_is_empty_buffer(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with patch("subprocess.run", return_value=_completed(stdout="")):
            assert invoker.run(RevisionQuery.from_path(tmp_path)) == ""

    def test_logs_command_line_at_debug(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        query = RevisionQuery.from_path(tmp_path)
        with caplog.at_level(logging.DEBUG, logger=INVOKER_LOGGER):
            with patch("subprocess.run", return_value=_completed(stdout="12")):
                invoker.run(query)
        debug_messages = [r.getMessage() for r in caplog.records if r.levelno == logging.DEBUG]
        assert any(invoker.command_line(query) in m for m in debug_messages)

    def test_executable_not_found(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with patch("subprocess.run", side_effect=FileNotFoundError(2, "No such file or directory")):
            with pytest.raises(ToolLaunchError, match="executable not found") as excinfo:
                invoker.run(RevisionQuery.from_path(tmp_path))
        assert "svnversion --no-newline" in excinfo.value.command

    def test_permission_denied(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        with patch("subprocess.run", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(ToolLaunchError, match="permission denied"):
                invoker.run(RevisionQuery.from_path(tmp_path))

    def test_non_zero_exit_raises_with_stderr(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        invoker = SvnversionInvoker(executable="svnversion")
        failed = _completed(stdout="4168", stderr="svnversion: E000002: Can't open file\n", returncode=1)
        with caplog.at_level(logging.DEBUG, logger=INVOKER_LOGGER):
            with patch("subprocess.run", return_value=failed):
                with pytest.raises(ToolExecutionError) as excinfo:
                    invoker.run(RevisionQuery.from_path(tmp_path))
        err = excinfo.value
        assert err.returncode == 1
        assert "E000002" in err.stderr
        assert "exited with status 1" in str(err)
        assert any("E000002" in r.getMessage() for r in caplog.records if r.levelno == logging.ERROR)


@posix_only
class TestRunWithFakeExecutable:
    def test_captures_range_output(self, tmp_path: Path, fake_svnversion) -> None:
        root = fake_svnversion(stdout="4168:4173MS")
        invoker = SvnversionInvoker(install_root=root, executable="svnversion")
        assert invoker.run(RevisionQuery.from_path(tmp_path)) == "4168:4173MS"

    def test_failure_exit(self, tmp_path: Path, fake_svnversion) -> None:
        root = fake_svnversion(stderr="svnversion: boom", exit_code=2)
        invoker = SvnversionInvoker(install_root=root, executable="svnversion")
        with pytest.raises(ToolExecutionError) as excinfo:
            invoker.run(RevisionQuery.from_path(tmp_path))
        assert excinfo.value.returncode == 2
        assert "boom" in excinfo.value.stderr

    def test_missing_executable(self, tmp_path: Path) -> None:
        invoker = SvnversionInvoker(install_root=tmp_path / "nowhere", executable="svnversion")
        with pytest.raises(ToolLaunchError):
            invoker.run(RevisionQuery.from_path(tmp_path))

    def test_undecodable_stdout_is_replaced(self, tmp_path: Path, fake_svnversion) -> None:
        root = fake_svnversion(stdout="4168\\377M")
        invoker = SvnversionInvoker(install_root=root, executable="svnversion")
        output = invoker.run(RevisionQuery.from_path(tmp_path))
        assert output == "4168\ufffdM"
        assert parse_output(output).modifications is True

    def test_undecodable_stderr_is_replaced(self, tmp_path: Path, fake_svnversion) -> None:
        root = fake_svnversion(stderr="\\377\\376 bad path", exit_code=1)
        invoker = SvnversionInvoker(install_root=root, executable="svnversion")
        with pytest.raises(ToolExecutionError) as excinfo:
            invoker.run(RevisionQuery.from_path(tmp_path))
        assert "bad path" in excinfo.value.stderr
