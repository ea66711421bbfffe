"""Tests for adapters.process_runner."""
import os
import sys

import pytest

from adapters.process_runner import NOT_FOUND_RETURNCODE, run_command


def test_exit_code_is_returned(tmp_path):
    assert run_command([sys.executable, "-c", "import sys; sys.exit(5)"], tmp_path) == 5


def test_runs_in_given_directory(tmp_path):
    code = "import pathlib; pathlib.Path('here').write_text('x')"
    assert run_command([sys.executable, "-c", code], tmp_path) == 0
    assert (tmp_path / "here").read_text() == "x"


def test_unknown_executable_maps_to_127(tmp_path):
    assert run_command(["definitely-not-a-real-command-xyz"], tmp_path) == NOT_FOUND_RETURNCODE == 127


def test_missing_directory_maps_to_127(tmp_path):
    assert run_command([sys.executable, "-c", "pass"], tmp_path / "nope") == 127


@pytest.mark.skipif(os.name == "nt", reason="POSIX exec semantics")
def test_executable_without_shebang_maps_to_127(tmp_path):
    script = tmp_path / "no-shebang"
    script.write_bytes(b"\x00\x01\x02 not a program\n")
    script.chmod(0o755)
    assert run_command([str(script)], tmp_path) == 127


@pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
def test_non_executable_file_maps_to_127(tmp_path):
    script = tmp_path / "plain"
    script.write_text("echo hi\n")
    script.chmod(0o644)
    assert run_command([str(script)], tmp_path) == 127
