from __future__ import annotations

import enum
import logging

from .channel import MessageChannel
from .command import Command, dispatch
from .errors import ChannelError
from .roles import EndpointRole
from .store import FileStore


class SessionState(enum.Enum):
    ESTABLISHED = "established"
    ACTIVE = "active"
    TERMINATED = "terminated"


class Session:
    """One endpoint's request/response loop over a single connection.

    The session owns the channel and closes it exactly once, when it terminates.
    """

    def __init__(self, channel: MessageChannel, store: FileStore, role: EndpointRole):
        self.channel = channel
        self.store = store
        self.role = role
        self._state = SessionState.ESTABLISHED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def terminated(self) -> bool:
        return self._state is SessionState.TERMINATED

    def terminate(self) -> None:
        if self.terminated:
            return
        self._state = SessionState.TERMINATED
        logging.info("[%s] terminating session", self.role.name)
        self.channel.close()

    def step(self) -> None:
        line = self.role.next_request(self)
        dispatch(Command.parse(line), self.role, self)

    def run(self) -> SessionState:
        if self.terminated:
            return self._state
        self._state = SessionState.ACTIVE
        logging.info("[%s] session active; base=%s", self.role.name, self.store.base)
        try:
            while not self.terminated:
                self.step()
        except ChannelError as e:
            logging.error("[%s] session aborted: %s", self.role.name, e)
        finally:
            self.terminate()
        return self._state
