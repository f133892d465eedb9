import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent


def _run_cli(args, cwd: Path = ROOT):
    env = os.environ.copy()
    pythonpath = env.get("PYTHONPATH", "")
    env["PYTHONPATH"] = str(ROOT / "src") + (os.pathsep + pythonpath if pythonpath else "")
    result = subprocess.run(
        [sys.executable, "-m", "cli", *args],
        cwd=cwd,
        env=env,
        check=False,
        capture_output=True,
        text=True,
    )
    return result


def test_cli_removes_export_to_file(tmp_path):
    output_path = tmp_path / "out.js"
    result = _run_cli(
        ["remove", "tests/cases/database.js", "--export", "foo", "--out", str(output_path)],
    )
    assert result.returncode == 0, result.stderr
    assert output_path.read_text(encoding="utf-8") == (
        "const USER = 114514;\nexport default USER;\n"
    )
    assert "removed declarations: database, foo" in result.stderr


def test_cli_writes_stdout_and_reports_ignored_names():
    result = _run_cli(
        ["remove", "tests/cases/mutual_recursion.js", "--export", "bar", "--export", "nope"],
    )
    assert result.returncode == 0, result.stderr
    assert result.stdout == ""
    assert "'nope' is not exported; nothing to remove" in result.stderr


def test_cli_conservative_mode(tmp_path):
    input_path = tmp_path / "input.js"
    input_path.write_text(
        "const bar = 233;\nexport function foo(bar) {}\n", encoding="utf-8"
    )
    result = _run_cli(["remove", str(input_path), "--export", "foo", "--conservative"])
    assert result.returncode == 0, result.stderr
    assert result.stdout == "const bar = 233;\n"


def test_cli_reports_parse_errors(tmp_path):
    input_path = tmp_path / "broken.js"
    input_path.write_text("export const = ;\n", encoding="utf-8")
    result = _run_cli(["remove", str(input_path), "--export", "foo"])
    assert result.returncode == 1
    assert "ERROR: Parsing failed" in result.stderr
    assert "supported syntax is ES2017 modules" in result.stderr
    assert result.stdout == ""


def test_cli_help_mentions_supported_syntax():
    result = _run_cli(["--help"])
    assert result.returncode == 0
    assert "ES2017 modules" in " ".join(result.stdout.split())


def test_cli_missing_input(tmp_path):
    result = _run_cli(["remove", str(tmp_path / "absent.js")])
    assert result.returncode == 1
    assert "Input file not found" in result.stderr
