from __future__ import annotations


class LineFtpError(Exception):
    pass


class ChannelError(LineFtpError):
    """Timeout, disconnect, or an undecodable line on the connection."""


class ProtocolError(ChannelError):
    """A numeric field (length, count, byte value) could not be parsed."""


class StoreError(LineFtpError):
    """A file or directory under the base directory could not be used."""
