from __future__ import annotations

import logging
import socket

from .constants import BYTE_MAX, BYTE_MIN, DEFAULT_TIMEOUT_S, ENCODING, MAX_LINE_BYTES, NEWLINE
from .errors import ChannelError, ProtocolError


class MessageChannel:
    """Line-oriented duplex text stream over one connected socket.

    Payloads are framed as a decimal count line followed by one decimal line per byte.
    """

    def __init__(self, sock: socket.socket, timeout_s: float = DEFAULT_TIMEOUT_S):
        self.sock = sock
        if timeout_s > 0:
            sock.settimeout(timeout_s)
        self._reader = sock.makefile("rb")
        self._writer = sock.makefile("wb")
        self._closed = False

    @classmethod
    def connecting(cls, host: str, port: int, timeout_s: float = DEFAULT_TIMEOUT_S) -> "MessageChannel":
        try:
            sock = socket.create_connection((host, port), timeout=timeout_s or None)
        except OSError as e:
            raise ChannelError(f"cannot connect to {host}:{port}: {e}") from e
        return cls(sock, timeout_s)

    @classmethod
    def accepting(cls, listener: socket.socket, timeout_s: float = DEFAULT_TIMEOUT_S) -> "MessageChannel":
        try:
            sock, addr = listener.accept()
        except OSError as e:
            raise ChannelError(f"no client accepted: {e}") from e
        logging.info("accepted client from %s:%d", addr[0], addr[1])
        return cls(sock, timeout_s)

    @property
    def closed(self) -> bool:
        return self._closed

    def send_message(self, text: str) -> None:
        self._write((text + NEWLINE).encode(ENCODING))

    def receive_message(self) -> str:
        try:
            raw = self._reader.readline(MAX_LINE_BYTES + 1)
        except TimeoutError as e:
            raise ChannelError("timed out waiting for a line") from e
        except OSError as e:
            raise ChannelError(f"receive failed: {e}") from e

        if not raw:
            raise ChannelError("connection closed by peer")
        if len(raw) > MAX_LINE_BYTES:
            raise ChannelError(f"line exceeds {MAX_LINE_BYTES} bytes")

        try:
            line = raw.decode(ENCODING)
        except UnicodeDecodeError as e:
            raise ChannelError(f"malformed {ENCODING} line: {e}") from e
        return line.rstrip("\r\n")

    def send_payload(self, data: bytes) -> None:
        lines = [str(len(data))]
        lines.extend(str(b) for b in data)
        self._write((NEWLINE.join(lines) + NEWLINE).encode(ENCODING))
        logging.debug("sent payload; size=%d bytes", len(data))

    def receive_payload(self) -> bytes:
        """Read one framed payload.

        Exactly the declared number of byte lines is always consumed. A malformed byte
        line is reported only after the rest of the payload has been drained.
        """
        count_line = self.receive_message()
        try:
            count = int(count_line)
        except ValueError as e:
            raise ProtocolError(f"invalid payload length: {count_line!r}") from e
        if count < 0:
            raise ProtocolError(f"invalid payload length: {count}")

        out = bytearray(count)
        first_bad: str | None = None
        for i in range(count):
            line = self.receive_message()
            if first_bad is not None:
                continue
            try:
                value = int(line)
            except ValueError:
                first_bad = f"byte {i}: {line!r}"
                continue
            if not BYTE_MIN <= value <= BYTE_MAX:
                first_bad = f"byte {i} out of range: {value}"
                continue
            out[i] = value & 0xFF

        if first_bad is not None:
            raise ProtocolError(f"malformed payload ({count} lines drained); {first_bad}")
        logging.debug("received payload; size=%d bytes", count)
        return bytes(out)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._writer.close()
        except OSError as e:
            logging.debug("flush on close failed: %s", e)
        self._reader.close()
        self.sock.close()

    def _write(self, raw: bytes) -> None:
        try:
            self._writer.write(raw)
            self._writer.flush()
        except OSError as e:
            raise ChannelError(f"send failed: {e}") from e
