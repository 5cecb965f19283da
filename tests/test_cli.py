import ipaddress

import pytest

from hecgen import __main__ as cli
from hecgen.config import ENV_VARS
from hecgen.errors import RemoteRejection, ResolutionError


@pytest.fixture(autouse=True)
def _isolated(monkeypatch, tmp_path):
  for env_name in ENV_VARS.values():
    monkeypatch.delenv(env_name, raising=False)
  monkeypatch.chdir(tmp_path)


class DummyConnection:
  instances = []
  close_error = None

  def __init__(self, config):
    self.config = config
    self.entries = []
    self.closed = False
    DummyConnection.instances.append(self)

  def negotiate_tag(self, name):
    return 0

  def wait_for_hot(self, timeout=None):
    pass

  def sync(self, timeout=None):
    pass

  def write_batch(self, entries):
    self.entries.extend(entries)

  def source_ip(self):
    return ipaddress.ip_address("10.0.0.5")

  def close(self):
    self.closed = True
    if DummyConnection.close_error is not None:
      raise DummyConnection.close_error


@pytest.fixture
def dummy(monkeypatch):
  DummyConnection.instances = []
  DummyConnection.close_error = None
  monkeypatch.setattr(cli, "HecConnection", DummyConnection)
  return DummyConnection


def test_cli_streams_entries(dummy, capsys):
  with pytest.raises(SystemExit) as excinfo:
    cli.main(["--url", "http://localhost:8088/services/collector", "--count", "5", "--raw", "--seed", "3"])

  assert excinfo.value.code == 0
  conn = dummy.instances[0]
  assert conn.config.raw_mode is True
  assert len(conn.entries) == 5
  assert conn.closed
  out = capsys.readouterr().out
  assert "10.0.0.5" in out
  assert "Sent 5 entries" in out


def test_cli_rejects_bad_config(dummy, capsys):
  with pytest.raises(SystemExit) as excinfo:
    cli.main(["--url", "not-a-url"])
  assert excinfo.value.code == cli.EXIT_CONFIG
  assert "invalid configuration" in capsys.readouterr().err
  assert dummy.instances == []


def test_cli_requires_url(dummy):
  with pytest.raises(SystemExit) as excinfo:
    cli.main([])
  assert excinfo.value.code == cli.EXIT_CONFIG


def test_cli_reports_connect_failure(monkeypatch, capsys):
  def refuse(config):
    raise ResolutionError("connection refused")

  monkeypatch.setattr(cli, "HecConnection", refuse)
  with pytest.raises(SystemExit) as excinfo:
    cli.main(["--url", "http://localhost:1/"])
  assert excinfo.value.code == cli.EXIT_CONNECT
  assert "connection refused" in capsys.readouterr().err


def test_cli_reports_upload_failure(dummy, capsys):
  dummy.close_error = RemoteRejection(403, "Forbidden", b"invalid token")
  with pytest.raises(SystemExit) as excinfo:
    cli.main(["--url", "http://localhost:8088/", "--count", "1"])
  assert excinfo.value.code == cli.EXIT_UPLOAD
  err = capsys.readouterr().err
  assert "403" in err
  assert "invalid token" in err


def test_cli_reads_config_file(dummy, tmp_path):
  path = tmp_path / "custom.yaml"
  path.write_text("url: http://from-file:8088/\ntag: filetag\ncount: 2\n")
  with pytest.raises(SystemExit) as excinfo:
    cli.main(["--config", str(path)])
  assert excinfo.value.code == 0
  conn = dummy.instances[0]
  assert conn.config.hec_url == "http://from-file:8088/"
  assert conn.config.tag == "filetag"
  assert len(conn.entries) == 2
