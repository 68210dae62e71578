import json
import subprocess
import sys


def run_cli(args):
    return subprocess.run(
        [sys.executable, "-m", "cliniscan.cli"] + args,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )


def test_cli_help():
    result = run_cli(["--help"])
    assert result.returncode == 0


def test_cli_version():
    result = run_cli(["--version"])
    assert result.returncode == 0
    assert result.stdout.startswith("CliniScan v")


def test_cli_formats():
    result = run_cli(["--formats"])
    assert result.returncode == 0
    assert "hl7" in result.stdout


def test_cli_analyzes_file_as_json(tmp_path, five_patient_csv):
    src = tmp_path / "patients.csv"
    src.write_text(five_patient_csv, encoding="utf-8")

    result = run_cli([str(src), "--json"])

    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["patientsCount"] == 5
    assert payload["recommendedStrategy"] == "batch_import"


def test_cli_unsupported_file_exits_nonzero(tmp_path):
    src = tmp_path / "notes.unknown"
    src.write_text("plain text content", encoding="utf-8")

    result = run_cli([str(src)])

    assert result.returncode == 1
    assert "UNSUPPORTED_FORMAT" in result.stdout
