from __future__ import annotations

import logging
import socket
from typing import Optional

from .channel import MessageChannel
from .constants import DEFAULT_TIMEOUT_S, ERROR_SENTINEL, PROMPT, PUT_FAILED, PUT_OK
from .errors import ChannelError, ProtocolError, StoreError
from .roles import EndpointRole
from .session import Session, SessionState
from .store import FileStore


class ServerRole(EndpointRole):
    """Prompts, then serves whatever the client asked for out of the session's store."""

    name = "server"

    def __init__(self, prompt: str = PROMPT):
        self.prompt = prompt

    def next_request(self, session: Session) -> str:
        session.channel.send_message(self.prompt)
        return session.channel.receive_message()

    def handle_put(self, session: Session, filename: Optional[str]) -> None:
        if filename is None:
            logging.warning("PUT without a filename; rejecting")
            session.channel.send_message(PUT_FAILED)
            return

        logging.info("receiving %s", filename)
        success = False
        try:
            data = session.channel.receive_payload()
            session.store.write_file(session.store.resolve(filename), data)
            success = True
        except ProtocolError as e:
            logging.warning("invalid upload of %s: %s", filename, e)
        except StoreError as e:
            logging.error("could not store %s: %s", filename, e)

        session.channel.send_message(PUT_OK if success else PUT_FAILED)

    def handle_get(self, session: Session, filename: Optional[str]) -> None:
        if filename is None:
            logging.warning("GET without a filename")
            session.channel.send_message(str(ERROR_SENTINEL))
            return

        path = session.store.resolve(filename)
        if not session.store.exists(path):
            logging.warning("%s does not exist", path)
            session.channel.send_message(str(ERROR_SENTINEL))
            return

        try:
            data = session.store.read_file(path)
        except StoreError as e:
            logging.error("%s", e)
            session.channel.send_message(str(ERROR_SENTINEL))
            return

        session.channel.send_message(str(len(data)))
        session.channel.send_payload(data)

    def handle_ls(self, session: Session) -> None:
        logging.info("listing available files")
        try:
            names = session.store.list_entries()
        except StoreError as e:
            logging.error("%s", e)
            session.channel.send_message(str(ERROR_SENTINEL))
            return

        sendable = [name for name in names if "\n" not in name and "\r" not in name]
        for name in set(names) - set(sendable):
            logging.warning("skipping entry with a line break in its name: %r", name)

        session.channel.send_message(str(len(sendable)))
        for name in sendable:
            session.channel.send_message(name)

    def handle_exit(self, session: Session) -> None:
        logging.info("client requested exit")
        session.terminate()

    def handle_other(self, session: Session, invalid_command: bool) -> None:
        if invalid_command:
            logging.debug("ignoring unrecognized command")


def open_listener(host: str, port: int, timeout_s: float = DEFAULT_TIMEOUT_S) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
        sock.listen(1)
    except OSError as e:
        sock.close()
        raise ChannelError(f"cannot listen on {host}:{port}: {e}") from e
    if timeout_s > 0:
        sock.settimeout(timeout_s)
    bound_host, bound_port = sock.getsockname()[:2]
    logging.info("bound to %s:%d", bound_host, bound_port)
    return sock


def serve_one(listener: socket.socket, store: FileStore, timeout_s: float = DEFAULT_TIMEOUT_S) -> SessionState:
    logging.info("serving files out of %s", store.base)
    logging.info("listening for connections")
    channel = MessageChannel.accepting(listener, timeout_s)
    return Session(channel, store, ServerRole()).run()


def serve(host: str, port: int, store: FileStore, timeout_s: float = DEFAULT_TIMEOUT_S) -> SessionState:
    """Accept exactly one client, serve it until it exits, then stop listening."""
    listener = open_listener(host, port, timeout_s)
    try:
        return serve_one(listener, store, timeout_s)
    finally:
        listener.close()
        logging.info("listening socket closed")
