import json
import subprocess
import sys
from pathlib import Path


SCRIPT = Path(__file__).resolve().parents[1] / "reloop_cleanup.py"


def _write_region(base: Path) -> Path:
    label = {"kind": "synthetic", "index": 0}
    payload = {
        "context": {"kind": "break_to", "label": label},
        "statements": [
            {
                "op": "expr",
                "expr": {
                    "op": "if",
                    "condition": {"op": "name", "name": "cond"},
                    "then": {
                        "op": "block",
                        "statements": [{"op": "effect", "expr": {"op": "break", "label": label}}],
                    },
                    "else": {
                        "op": "block",
                        "statements": [{"op": "effect", "expr": {"op": "break", "label": label}}],
                    },
                },
            }
        ],
    }
    path = base / "region.json"
    path.write_text(json.dumps(payload, indent=2), "utf-8")
    return path


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        capture_output=True,
        text=True,
    )


def test_cli_writes_cleaned_json(tmp_path: Path) -> None:
    region = _write_region(tmp_path)
    output = tmp_path / "clean.json"

    result = _run(str(region), "--output", str(output))

    assert result.returncode == 0, result.stderr
    assert "removed 2 redundant terminal(s)" in result.stdout
    payload = json.loads(output.read_text("utf-8"))
    conditional = payload["statements"][0]["expr"]
    assert conditional["then"] == {"op": "block", "statements": []}
    assert "else" not in conditional


def test_cli_text_output_on_stdout(tmp_path: Path) -> None:
    region = _write_region(tmp_path)

    result = _run(str(region), "--format", "text", "--verbose")

    assert result.returncode == 0, result.stderr
    assert result.stdout == "if cond {}\n"
    assert "removed 2 redundant terminal(s)" in result.stderr
    assert "removed redundant tail statement" in result.stderr


def test_cli_reports_malformed_region(tmp_path: Path) -> None:
    region = tmp_path / "broken.json"
    region.write_text(json.dumps({"context": {"kind": "break_to"}, "statements": []}), "utf-8")

    result = _run(str(region))

    assert result.returncode != 0
    assert "invalid region" in result.stderr
    assert "requires a label" in result.stderr


def test_cli_reports_missing_input(tmp_path: Path) -> None:
    result = _run(str(tmp_path / "absent.json"))

    assert result.returncode != 0
    assert "missing input file" in result.stderr


def test_cli_reports_undecodable_region(tmp_path: Path) -> None:
    region = tmp_path / "region.json"
    region.write_bytes(b"\xff\xfe{}")

    result = _run(str(region))

    assert result.returncode != 0
    assert "invalid region" in result.stderr
    assert "Traceback" not in result.stderr
