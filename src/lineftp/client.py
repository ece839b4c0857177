from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from .channel import MessageChannel
from .command import Command, Verb
from .constants import DEFAULT_TIMEOUT_S, ERROR_SENTINEL, NOOP
from .errors import ProtocolError, StoreError
from .roles import EndpointRole
from .session import Session, SessionState
from .store import FileStore


def parse_length(line: str) -> int:
    """Parse a length or count reply; the error sentinel is the only negative value allowed."""
    try:
        value = int(line)
    except ValueError as e:
        raise ProtocolError(f"expected a length, got {line!r}") from e
    if value < ERROR_SENTINEL:
        raise ProtocolError(f"invalid length: {value}")
    return value


class ClientRole(EndpointRole):
    """Reads commands from a console and drives the server with them.

    Whenever a command is rejected locally, the no-op line is sent instead so the
    server still gets exactly one line for the prompt it sent.
    """

    name = "client"

    def __init__(self, console: Optional[TextIO] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        self.console = console or sys.stdin
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def next_request(self, session: Session) -> str:
        reply = session.channel.receive_message()
        print(reply, end=" ", file=self.out, flush=True)

        line = self.console.readline()
        if line == "":
            logging.info("end of console input; exiting")
            return Verb.EXIT.value
        return line.rstrip("\r\n")

    def handle_put(self, session: Session, filename: Optional[str]) -> None:
        if filename is None:
            self._fail(session, "PUT requires a filename.")
            return

        path = session.store.resolve(filename)
        if not session.store.exists(path):
            self._fail(session, f"{path} does not exist.")
            return
        try:
            data = session.store.read_file(path)
        except StoreError as e:
            self._fail(session, str(e))
            return

        session.channel.send_message(Command(Verb.PUT, (filename,)).to_line())
        session.channel.send_payload(data)
        reply = session.channel.receive_message()
        print(f"Server reply: {reply}", file=self.out)

    def handle_get(self, session: Session, filename: Optional[str]) -> None:
        if filename is None:
            self._fail(session, "GET requires a filename.")
            return

        session.channel.send_message(Command(Verb.GET, (filename,)).to_line())
        try:
            length = parse_length(session.channel.receive_message())
            if length == ERROR_SENTINEL:
                self._report(f"{filename} does not exist on the server.")
                return
            data = session.channel.receive_payload()
        except ProtocolError as e:
            self._report(f"Transfer of {filename} failed: {e}")
            return
        if len(data) != length:
            self._report(f"Transfer of {filename} failed: expected {length} bytes, got {len(data)}")
            return

        try:
            session.store.write_file(session.store.resolve(filename), data)
        except StoreError as e:
            self._report(str(e))
            return
        print(f"Received {filename} ({length} bytes).", file=self.out)

    def handle_ls(self, session: Session) -> None:
        session.channel.send_message(Verb.LS.value)
        try:
            count = parse_length(session.channel.receive_message())
        except ProtocolError as e:
            self._report(f"Listing failed: {e}")
            return
        if count == ERROR_SENTINEL:
            self._report("Server directory is not available.")
            return

        for _ in range(count):
            print(f"\t{session.channel.receive_message()}", file=self.out)

    def handle_exit(self, session: Session) -> None:
        session.channel.send_message(Verb.EXIT.value)
        session.terminate()

    def handle_other(self, session: Session, invalid_command: bool) -> None:
        session.channel.send_message(NOOP)
        if invalid_command:
            print("Invalid command.", file=self.err)

    def _report(self, message: str) -> None:
        logging.warning("%s", message)
        print(message, file=self.err)

    def _fail(self, session: Session, message: str) -> None:
        self._report(message)
        self.handle_other(session, invalid_command=False)


def connect(
    host: str,
    port: int,
    store: FileStore,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    role: Optional[ClientRole] = None,
) -> SessionState:
    logging.info("working out of %s", store.base)
    logging.info("connecting to %s:%d", host, port)
    channel = MessageChannel.connecting(host, port, timeout_s)
    logging.info("connection established")
    return Session(channel, store, role or ClientRole()).run()
