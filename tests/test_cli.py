"""CLI: verifies argument handling without starting servers."""

import logging

import pytest

from apidoc_examples import cli
from apidoc_examples.examples import EXAMPLES


def test_list_prints_examples_with_ports(capsys):
    assert cli.main(["--list"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert [line.split()[0] for line in lines] == list(EXAMPLES)
    assert lines[0].split()[1] == "10000"
    assert lines[3].split()[2] == "declared"


def test_list_honours_base_port_override(capsys):
    assert cli.main(["--list", "--base-port", "20000"]) == 0
    assert capsys.readouterr().out.splitlines()[1].split()[1] == "20001"


def test_unknown_example_exits_with_error(monkeypatch):
    def _never(*args, **kwargs):
        raise AssertionError("servers must not start")

    monkeypatch.setattr(cli, "serve_all", _never)
    assert cli.main(["--only", "nope"]) == 1


def test_selected_examples_are_served(monkeypatch):
    served = []

    async def _fake_serve_all(servers):
        served.extend((s.name, s.port) for s in servers)

    monkeypatch.setattr(cli, "serve_all", _fake_serve_all)
    assert cli.main(["--only", "enum-mapping", "--only", "nesting-with-routers"]) == 0
    assert served == [("enum-mapping", 10000), ("nesting-with-routers", 10001)]


def test_list_honours_selection(capsys):
    assert cli.main(["--list", "--only", "enum-mapping"]) == 0
    assert capsys.readouterr().out.split() == ["enum-mapping", "10000", "declared"]


def test_list_rejects_unknown_selection(capsys):
    assert cli.main(["--list", "--only", "nope"]) == 1
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("argv", [
    ["--list", "--base-port", "-5"],
    ["--list", "--base-port", "65535"],
])
def test_invalid_override_exits_with_error(argv, caplog):
    caplog.set_level(logging.CRITICAL, logger="apidoc_examples.cli")
    assert cli.main(argv) == 1
    assert "base_port" in caplog.records[-1].getMessage()


def test_invalid_environment_exits_with_error(monkeypatch, caplog):
    monkeypatch.setenv("APIDOC_LOG_FORMAT", "xml")
    caplog.set_level(logging.CRITICAL, logger="apidoc_examples.cli")
    assert cli.main(["--list"]) == 1
    assert "log_format" in caplog.records[-1].getMessage()
