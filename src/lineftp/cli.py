from __future__ import annotations

import argparse
import logging
import os
import socket

from .client import connect
from .constants import DEFAULT_HOST, DEFAULT_TIMEOUT_S
from .errors import ChannelError
from .server import serve
from .store import FileStore


def port_number(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from None
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"port out of range: {port}")
    return port


def directory(value: str) -> str:
    if not os.path.isdir(value):
        raise argparse.ArgumentTypeError(f"invalid directory: {value!r}")
    return value


def address(value: str) -> str:
    try:
        return socket.gethostbyname(value)
    except OSError as e:
        raise argparse.ArgumentTypeError(f"bad address {value!r}: {e}") from None


def cmd_server(args: argparse.Namespace) -> int:
    store = FileStore.at(args.directory)
    try:
        serve(args.listen_host, args.port, store, timeout_s=args.timeout)
    except ChannelError as e:
        logging.error("%s", e)
        return 1
    return 0


def cmd_client(args: argparse.Namespace) -> int:
    store = FileStore.at(args.directory)
    try:
        connect(args.ip, args.port, store, timeout_s=args.timeout)
    except ChannelError as e:
        logging.error("%s", e)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="lineftp", description="Line-oriented file transfer (PUT/GET/LS/EXIT) over TCP.")
    p.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_S, help="socket timeout in seconds")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_common(x: argparse.ArgumentParser) -> None:
        x.add_argument("-p", dest="port", type=port_number, required=True, help="port number")
        x.add_argument("-d", dest="directory", type=directory, default=os.getcwd(), help="file directory")

    server = sub.add_parser("server", help="serve one client out of a directory")
    add_common(server)
    server.add_argument("--listen-host", default=DEFAULT_HOST)
    server.set_defaults(func=cmd_server)

    client = sub.add_parser("client", help="connect to a server and enter commands")
    client.add_argument("-i", dest="ip", type=address, required=True, help="server address")
    add_common(client)
    client.set_defaults(func=cmd_client)

    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
