import json
import logging

import pytest
from typer.testing import CliRunner

from hashfile import __version__
from hashfile.main import app

runner = CliRunner()


@pytest.fixture()
def cli_workspace(tmp_path, monkeypatch):
    # Keep config discovery away from the developer's own files
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    yield tmp_path.resolve()
    # The CLI installs handlers bound to the runner's streams
    logging.getLogger().handlers.clear()


def invoke(*args, input=None):
    return runner.invoke(app, list(args), input=input)


def test_version():
    result = invoke("--version")

    assert result.exit_code == 0
    assert __version__ in result.output


def test_read(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\nb\nc\n")

    result = invoke("read", str(path))

    assert result.exit_code == 0, result.output
    assert "1:8c|a\n2:a5|b\n3:f2|c\n---\n" in result.output
    assert "file_hash: 04c167" in result.output


def test_read_json(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\nb\nc\n")

    result = invoke("read", str(path), "--json")

    assert result.exit_code == 0, result.output
    event = json.loads(result.output.strip().splitlines()[-1])
    assert event["type"] == "file.read"
    assert event["file_hash"] == "04c167"
    assert event["total_lines"] == 3
    assert event["content"].startswith("1:8c|a\n")


def test_read_outside_root_fails(cli_workspace):
    root = cli_workspace / "project"
    root.mkdir()
    path = cli_workspace / "abc.txt"
    path.write_text("a\n")

    result = invoke("read", str(path), "--root", str(root))

    assert result.exit_code == 1
    assert "path_not_allowed" in result.output


def test_edit_from_ops_file(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\nb\nc\n")
    ops = cli_workspace / "ops.json"
    ops.write_text(json.dumps([{"op_type": "insert_after", "anchor": "2:a5", "content": "b2"}]))

    result = invoke("edit", str(path), "--file-hash", "04c167", "--ops", str(ops))

    assert result.exit_code == 0, result.output
    assert path.read_text() == "a\nb\nb2\nc\n"
    assert "3:95|b2" in result.output


def test_edit_from_stdin_json(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\nb\nc\n")
    payload = json.dumps({"operations": [{"op_type": "delete", "anchor": "2:a5"}]})

    result = invoke("edit", str(path), "--file-hash", "04c167", "--json", input=payload)

    assert result.exit_code == 0, result.output
    event = json.loads(result.output.strip().splitlines()[-1])
    assert event["type"] == "file.edited"
    assert event["file_hash"] == "397dab"
    assert event["operations_applied"] == 1
    assert path.read_text() == "a\nc\n"


def test_edit_stale_json_error(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\nb\nc\n")
    payload = json.dumps([{"op_type": "delete", "anchor": "2:a5"}])

    result = invoke("edit", str(path), "--file-hash", "000000", "--json", input=payload)

    assert result.exit_code == 1
    event = json.loads(result.output.strip().splitlines()[-1])
    assert event == {"message": event["message"], "code": "stale_file", "type": "error"}
    assert path.read_text() == "a\nb\nc\n"


def test_edit_rejects_bad_json(cli_workspace):
    path = cli_workspace / "abc.txt"
    path.write_text("a\n")

    result = invoke("edit", str(path), "--file-hash", "01ec8c", input="not json")

    assert result.exit_code == 1
    assert "not valid JSON" in result.output


def test_write_from_stdin(cli_workspace):
    path = cli_workspace / "out" / "f.txt"

    result = invoke("write", str(path), input="a\nb\nc\n")

    assert result.exit_code == 0, result.output
    assert path.read_text() == "a\nb\nc\n"
    assert "04c167" in result.output


def test_write_json(cli_workspace):
    path = cli_workspace / "f.txt"
    content = cli_workspace / "content.txt"
    content.write_text("a\nb\nc\n")

    result = invoke("write", str(path), "--content-file", str(content), "--json")

    assert result.exit_code == 0, result.output
    event = json.loads(result.output.strip().splitlines()[-1])
    assert event == {
        "path": str(path),
        "size": 6,
        "file_hash": "04c167",
        "type": "file.written",
    }


def test_config_command_uses_discovered_file(cli_workspace):
    (cli_workspace / "hashfile.toml").write_text("[limits]\nmax_operations = 7\n")

    result = invoke("config", "--json")

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["limits"]["max_operations"] == 7
    assert data["output"]["mode"] == "json"


def test_invalid_config_file(cli_workspace):
    bad = cli_workspace / "bad.toml"
    bad.write_text("[limits]\nmax_operations = 'many'\n")

    result = invoke("read", "x.txt", "--config", str(bad))

    assert result.exit_code == 1
    assert "Error loading configuration" in result.output


def test_write_keeps_crlf_bytes(cli_workspace):
    source = cli_workspace / "crlf.txt"
    source.write_bytes(b"a\r\nb\r\n")
    target = cli_workspace / "out.txt"

    result = invoke(
        "write", str(target), "--content-file", str(source), "--root", str(cli_workspace)
    )

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"a\r\nb\r\n"


def test_write_keeps_crlf_from_stdin(cli_workspace):
    target = cli_workspace / "out.txt"

    result = invoke("write", str(target), input=b"a\r\nb\r\n")

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"a\r\nb\r\n"
