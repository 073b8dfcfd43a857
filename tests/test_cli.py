"""
Tests for the p0f-query command line.
"""

import json
import os

import pytest

from p0f_client.cli import EXIT_ERROR, EXIT_OK, EXIT_USAGE, main
from p0f_client.core.protocol import Status, encode_response

from conftest import FakeP0fDaemon, make_response


@pytest.fixture
def no_match_daemon(socket_dir, no_match_response):
    daemon = FakeP0fDaemon(os.path.join(socket_dir, "nomatch.sock"),
                           lambda query: encode_response(no_match_response))
    yield daemon
    daemon.close()


@pytest.fixture
def bad_query_daemon(socket_dir):
    daemon = FakeP0fDaemon(os.path.join(socket_dir, "badquery.sock"),
                           lambda query: encode_response(make_response(status=Status.BAD_QUERY)))
    yield daemon
    daemon.close()


class TestMain:

    def test_match(self, p0f_daemon, capsys):
        assert main(["-s", p0f_daemon.path, "-ip", "192.168.1.10"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "Response: Linux 3.11 and newer (fuzzy)"

    def test_no_match(self, no_match_daemon, capsys):
        assert main(["-s", no_match_daemon.path, "-ip", "::1"]) == EXIT_OK
        assert capsys.readouterr().out.strip() == "No match found"

    def test_json_output(self, p0f_daemon, capsys):
        assert main(["-s", p0f_daemon.path, "-ip", "10.0.0.1", "-of", "json"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["os_name"] == "Linux"

    def test_detailed_output(self, p0f_daemon, capsys):
        assert main(["--socket", p0f_daemon.path, "--ip", "10.0.0.1", "-of", "detailed"]) == EXIT_OK
        assert "Link type: Ethernet or modem" in capsys.readouterr().out

    def test_bad_query(self, bad_query_daemon, capsys):
        assert main(["-s", bad_query_daemon.path, "-ip", "10.0.0.1"]) == EXIT_ERROR
        assert "Error:" in capsys.readouterr().err

    def test_missing_ip(self, capsys):
        assert main(["-s", "/tmp/p0f.sock"]) == EXIT_USAGE
        assert "Usage" in capsys.readouterr().err

    def test_invalid_ip(self, p0f_daemon, capsys):
        assert main(["-s", p0f_daemon.path, "-ip", "999.1.1.1"]) == EXIT_ERROR
        assert "invalid IP address: 999.1.1.1" in capsys.readouterr().err
        assert p0f_daemon.queries == []

    def test_cannot_connect(self, socket_dir, capsys):
        assert main(["-s", socket_dir + "/missing.sock", "-ip", "10.0.0.1"]) == EXIT_ERROR
        assert "Can't connect to socket" in capsys.readouterr().err

    def test_socket_from_config(self, p0f_daemon, tmp_path, capsys):
        config = tmp_path / "cfg.json"
        config.write_text(json.dumps({
            "client": {"socket_path": p0f_daemon.path},
            "general": {"output_format": "json", "log_level": "ERROR"},
        }))
        assert main(["-c", str(config), "-ip", "10.0.0.1"]) == EXIT_OK
        assert json.loads(capsys.readouterr().out)["status"] == "ok"

    def test_socket_from_env_is_a_path(self, socket_dir, monkeypatch, capsys):
        monkeypatch.chdir(socket_dir)
        monkeypatch.setenv("P0F_CLIENT_SOCKET_PATH", "true")
        assert main(["-ip", "10.0.0.1"]) == EXIT_ERROR
        assert "Can't connect to socket: could not stat" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, capsys):
        config = tmp_path / "cfg.json"
        config.write_text('{"general": {"output_format": "xml"}}')
        assert main(["-c", str(config), "-ip", "10.0.0.1"]) == EXIT_ERROR
        assert "invalid config" in capsys.readouterr().err
