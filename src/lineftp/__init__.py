"""Line File Transfer Protocol (lineftp)

A single-connection PUT/GET/LS/EXIT file transfer over a line-oriented TCP stream:
- the message channel owns framing (text lines, line-per-byte payloads)
- the session owns the request/response loop and its termination
- client and server roles implement the same five operations in opposite directions
"""

__all__ = []
