from __future__ import annotations

import io
import threading
import time

import pytest

from lineftp.channel import MessageChannel
from lineftp.cli import build_parser, cmd_client, cmd_server, main
from lineftp.constants import PROMPT
from lineftp.errors import ChannelError
from lineftp.server import open_listener, serve_one
from lineftp.store import FileStore


def test_server_args(tmp_path):
    args = build_parser().parse_args(["server", "-p", "2121", "-d", str(tmp_path)])
    assert args.port == 2121
    assert args.directory == str(tmp_path)
    assert args.func is cmd_server


def test_client_args(tmp_path):
    args = build_parser().parse_args(["--timeout", "7", "client", "-i", "127.0.0.1", "-p", "2121"])
    assert args.ip == "127.0.0.1"
    assert args.timeout == 7.0
    assert args.func is cmd_client


@pytest.mark.parametrize(
    "argv",
    [
        ["server"],
        ["server", "-p"],
        ["server", "-p", "0"],
        ["server", "-p", "http"],
        ["server", "-p", "70000"],
        ["client", "-p", "2121"],
        ["client", "-i", "127.0.0.1"],
    ],
)
def test_usage_errors(argv):
    with pytest.raises(SystemExit) as e:
        build_parser().parse_args(argv)
    assert e.value.code == 2


def test_invalid_directory(tmp_path):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["server", "-p", "2121", "-d", str(tmp_path / "missing")])


def test_help(capsys):
    with pytest.raises(SystemExit) as e:
        build_parser().parse_args(["client", "-h"])
    assert e.value.code == 0
    assert "-i" in capsys.readouterr().out


def test_client_against_live_server(tmp_path, monkeypatch, capsys):
    served = tmp_path / "served"
    local = tmp_path / "local"
    served.mkdir()
    local.mkdir()
    (served / "hello.txt").write_text("hi")

    listener = open_listener("127.0.0.1", 0, timeout_s=5.0)
    port = listener.getsockname()[1]
    t = threading.Thread(target=serve_one, args=(listener, FileStore.at(served), 5.0), daemon=True)
    t.start()

    monkeypatch.setattr("sys.stdin", io.StringIO("GET hello.txt\nLS\nEXIT\n"))
    rc = main(["--timeout", "5", "client", "-i", "127.0.0.1", "-p", str(port), "-d", str(local)])
    t.join(timeout=5.0)
    listener.close()

    assert rc == 0
    assert (local / "hello.txt").read_text() == "hi"
    assert "\thello.txt" in capsys.readouterr().out


def test_client_connection_refused(tmp_path):
    listener = open_listener("127.0.0.1", 0, timeout_s=5.0)
    port = listener.getsockname()[1]
    listener.close()

    assert main(["--timeout", "2", "client", "-i", "127.0.0.1", "-p", str(port), "-d", str(tmp_path)]) == 1


def test_server_exits_zero_after_client_exit(tmp_path):
    listener = open_listener("127.0.0.1", 0, timeout_s=5.0)
    port = listener.getsockname()[1]
    listener.close()

    result = {}
    t = threading.Thread(
        target=lambda: result.update(rc=main(["--timeout", "5", "server", "-p", str(port), "-d", str(tmp_path)])),
        daemon=True,
    )
    t.start()

    peer = None
    for _ in range(50):
        try:
            peer = MessageChannel.connecting("127.0.0.1", port, timeout_s=5.0)
            break
        except ChannelError:
            time.sleep(0.05)
    assert peer is not None
    assert peer.receive_message() == PROMPT
    peer.send_message("EXIT")
    t.join(timeout=5.0)
    peer.close()

    assert result["rc"] == 0
