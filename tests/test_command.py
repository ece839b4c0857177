from __future__ import annotations

from lineftp.command import Command, Verb, dispatch


class RecordingRole:
    def __init__(self):
        self.calls = []

    def handle_put(self, session, filename):
        self.calls.append(("put", filename))

    def handle_get(self, session, filename):
        self.calls.append(("get", filename))

    def handle_ls(self, session):
        self.calls.append(("ls",))

    def handle_exit(self, session):
        self.calls.append(("exit",))

    def handle_other(self, session, invalid_command):
        self.calls.append(("other", invalid_command))


def route(line):
    role = RecordingRole()
    dispatch(Command.parse(line), role, session=None)
    return role.calls


def test_verbs_are_case_insensitive():
    assert route("put a.txt") == [("put", "a.txt")]
    assert route("Get b.bin") == [("get", "b.bin")]
    assert route("ls") == [("ls",)]
    assert route("EXIT") == [("exit",)]


def test_missing_filename_is_passed_through():
    assert route("PUT") == [("put", None)]
    assert route("GET   ") == [("get", None)]


def test_extra_tokens_ignored():
    assert route("LS -la /tmp") == [("ls",)]
    assert route("exit now please") == [("exit",)]
    assert route("PUT a.txt b.txt") == [("put", "a.txt")]


def test_empty_line_is_not_invalid():
    assert route("") == [("other", False)]
    assert route(" \t ") == [("other", False)]


def test_unknown_verb_is_invalid():
    assert route("FOO bar") == [("other", True)]
    assert route("other") == [("other", True)]


def test_to_line():
    assert Command(Verb.PUT, ("report.txt",)).to_line() == "PUT report.txt"
    assert Command.parse("get x").to_line() == "GET x"
    assert Command.parse("ls extra").to_line() == "LS"
