from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from .roles import EndpointRole
    from .session import Session


class Verb(enum.Enum):
    PUT = "PUT"
    GET = "GET"
    LS = "LS"
    EXIT = "EXIT"
    OTHER = "OTHER"

    @staticmethod
    def from_token(token: str) -> "Verb":
        try:
            return Verb(token.upper())
        except ValueError:
            return Verb.OTHER


@dataclass(frozen=True, slots=True)
class Command:
    verb: Verb
    args: Tuple[str, ...] = ()
    empty: bool = False

    @property
    def filename(self) -> Optional[str]:
        return self.args[0] if self.args else None

    @property
    def invalid(self) -> bool:
        return self.verb is Verb.OTHER and not self.empty

    @staticmethod
    def parse(line: str) -> "Command":
        tokens = line.split()
        if not tokens:
            return Command(verb=Verb.OTHER, empty=True)
        return Command(verb=Verb.from_token(tokens[0]), args=tuple(tokens[1:]))

    def to_line(self) -> str:
        if self.verb in (Verb.PUT, Verb.GET) and self.filename is not None:
            return f"{self.verb.value} {self.filename}"
        return self.verb.value


def dispatch(command: Command, role: "EndpointRole", session: "Session") -> None:
    if command.verb is Verb.PUT:
        role.handle_put(session, command.filename)
    elif command.verb is Verb.GET:
        role.handle_get(session, command.filename)
    elif command.verb is Verb.LS:
        role.handle_ls(session)
    elif command.verb is Verb.EXIT:
        role.handle_exit(session)
    else:
        role.handle_other(session, invalid_command=command.invalid)
