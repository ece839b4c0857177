from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .session import Session


class EndpointRole(abc.ABC):
    """The five protocol operations, implemented once per side of the connection."""

    name = "endpoint"

    @abc.abstractmethod
    def next_request(self, session: "Session") -> str:
        """Run the role's half of a round up to the point a command line is known."""

    @abc.abstractmethod
    def handle_put(self, session: "Session", filename: Optional[str]) -> None: ...

    @abc.abstractmethod
    def handle_get(self, session: "Session", filename: Optional[str]) -> None: ...

    @abc.abstractmethod
    def handle_ls(self, session: "Session") -> None: ...

    @abc.abstractmethod
    def handle_exit(self, session: "Session") -> None: ...

    @abc.abstractmethod
    def handle_other(self, session: "Session", invalid_command: bool) -> None: ...
