from __future__ import annotations

import socket

import pytest

from lineftp.channel import MessageChannel


@pytest.fixture
def channel_pair():
    a, b = socket.socketpair()
    left = MessageChannel(a, timeout_s=5.0)
    right = MessageChannel(b, timeout_s=5.0)
    yield left, right
    left.close()
    right.close()
