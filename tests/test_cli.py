import gzip
import json
import os
import tempfile
import warnings

from click.testing import CliRunner

from pispigot.cli import main


def test_generate_to_stdout():
    runner = CliRunner()
    result = runner.invoke(main, ["generate", "--digits", "10", "--out", "-", "--no-timing"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "3.1415926535"


def test_generate_stream_to_stdout_with_label():
    runner = CliRunner()
    result = runner.invoke(main, ["generate", "--digits", "12", "--stream", "--chunk-size", "5", "--label", "--out", "-", "--no-timing"])
    assert result.exit_code == 0
    assert result.stdout.strip() == "Pi = 3.141592653589"


def test_generate_json_file_with_verify():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as td:
        stem = os.path.join(td, "pi")
        result = runner.invoke(main, ["generate", "--digits", "50", "--format", "json", "--verify", "--out", stem])
        assert result.exit_code == 0
        path = stem + ".json"
        assert os.path.exists(path)
        with open(path, "rb") as f:
            payload = json.loads(f.read().decode("utf-8"))
        assert payload["value"] == "3.14159265358979323846264338327950288419716939937510"
        assert payload["digits"] == 50


def test_generate_stream_gzip_with_verify():
    runner = CliRunner()
    with tempfile.TemporaryDirectory() as td:
        stem = os.path.join(td, "pi")
        result = runner.invoke(main, ["generate", "--digits", "30", "--stream", "--compression", "gzip", "--verify", "--out", stem])
        assert result.exit_code == 0
        with gzip.open(stem + ".txt.gz", "rb") as f:
            assert f.read() == b"3.141592653589793238462643383279"


def test_generate_rejects_negative_digits():
    runner = CliRunner()
    result = runner.invoke(main, ["generate", "--digits", "-1", "--out", "-"])
    assert result.exit_code != 0
    assert "--digits must be >= 0" in result.output


def test_generate_rejects_stream_json():
    runner = CliRunner()
    result = runner.invoke(main, ["generate", "--stream", "--format", "json", "--out", "-"])
    assert result.exit_code != 0


def test_verify_command():
    runner = CliRunner()
    result = runner.invoke(main, ["verify", "--digits", "100"])
    assert result.exit_code == 0
    assert "verified 100 digits" in result.output


def test_margin_command():
    runner = CliRunner()
    result = runner.invoke(main, ["margin", "--start", "0", "--stop", "60"])
    assert result.exit_code == 0
    assert "checked 60 digit counts" in result.output


def test_digits_from_environment():
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["generate", "--out", "-", "--no-timing"],
        auto_envvar_prefix="PISPIGOT",
        env={"PISPIGOT_GENERATE_DIGITS": "5"},
    )
    assert result.exit_code == 0
    assert result.stdout.strip() == "3.14159"


def test_stdout_output_raises_no_warnings():
    runner = CliRunner()
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        result = runner.invoke(main, ["generate", "--digits", "5", "--out", "-", "--no-timing"])
        streamed = runner.invoke(main, ["generate", "--digits", "5", "--stream", "--out", "-", "--no-timing"])
    assert result.exit_code == 0, result.output
    assert streamed.exit_code == 0, streamed.output
    assert result.stdout.strip() == "3.14159"
    assert streamed.stdout.strip() == "3.14159"


def test_stream_gzip_to_stdout():
    runner = CliRunner()
    result = runner.invoke(main, ["generate", "--digits", "8", "--stream", "--compression", "gzip", "--out", "-", "--no-timing"])
    assert result.exit_code == 0
    assert gzip.decompress(result.stdout_bytes) == b"3.14159265"
