import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from contractrpc import __version__
from contractrpc.cli import logging_utils
from contractrpc.cli.commands import app, load_router
from contractrpc.server.router import Router
from contractrpc.utils.exceptions import ConfigurationError

runner = CliRunner()

ROUTER_MODULE = '''
from contractrpc import make_rpc

rpc = make_rpc()
rpc.router.register(rpc.procedure.name("ping").output(str).query(lambda *, ctx, input: "pong"))
rpc.router.register(rpc.procedure.name("echo").input(int).output(int).mock(lambda input: input, "mutation"))
router = rpc.router


def build():
    return rpc


not_a_router = 42
'''


@pytest.fixture(autouse=True)
def _restore_logging():
    yield
    logging_utils._SINK_IDS.clear()
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def router_module(tmp_path, monkeypatch):
    (tmp_path / "sample_rpc_app.py").write_text(ROUTER_MODULE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "sample_rpc_app", raising=False)
    return "sample_rpc_app"


@pytest.mark.parametrize("attribute", ["router", "rpc", "build"])
def test_load_router_accepts_router_bundle_and_factory(router_module, attribute):
    router = load_router(f"{router_module}:{attribute}")
    assert isinstance(router, Router)
    assert len(router) == 2


@pytest.mark.parametrize("target", ["no_colon", "sample_rpc_app:not_a_router", "sample_rpc_app:missing"])
def test_load_router_rejects_bad_targets(router_module, target):
    with pytest.raises(ConfigurationError):
        load_router(target)


def test_version_command():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_spec_command_prints_json(router_module):
    result = runner.invoke(app, ["spec", f"{router_module}:router"])

    assert result.exit_code == 0
    spec = json.loads(result.stdout)
    assert [p["name"] for p in spec["procedures"]] == ["ping", "echo"]
    assert spec["procedures"][1]["method"] == "POST"
    assert spec["procedures"][1]["inputSchema"] == {"type": "integer"}


def test_spec_command_writes_file(router_module, tmp_path):
    target = tmp_path / "out" / "spec.json"
    result = runner.invoke(app, ["spec", f"{router_module}:rpc", "--output", str(target)])

    assert result.exit_code == 0
    assert json.loads(target.read_text(encoding="utf-8"))["procedures"][0]["name"] == "ping"


def test_spec_command_reports_import_failure():
    result = runner.invoke(app, ["spec", "definitely_not_a_module_xyz:router"])
    assert result.exit_code == 1


def test_procedures_command_lists_table(router_module):
    result = runner.invoke(app, ["--log-level", "WARNING", "procedures", f"{router_module}:router"])

    assert result.exit_code == 0
    assert "ping" in result.stdout
    assert "echo" in result.stdout
    assert "mutation" in result.stdout


def test_log_file_sink_from_settings(router_module, tmp_path, monkeypatch):
    log_file = tmp_path / "logs" / "cli.log"
    monkeypatch.setenv("CONTRACTRPC_LOG_FILE", str(log_file))

    result = runner.invoke(app, ["spec", f"{router_module}:router", "-o", str(tmp_path / "spec.json")])

    assert result.exit_code == 0
    assert str(log_file) in logging_utils._SINK_IDS
    logger.complete()
    assert log_file.exists()
