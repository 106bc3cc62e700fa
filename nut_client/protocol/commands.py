"""Command registry and response classification for the NUT line protocol."""

from dataclasses import dataclass
from enum import Enum

from nut_client.protocol.constants import (
    MARKER_OK, MARKER_BEGIN, MARKER_END, MARKER_VAR, MARKER_UPS, MARKER_ERR,
    ERROR_DESCRIPTIONS,
)
from nut_client.protocol.tokens import quote, split_tokens


@dataclass
class NUTCommand:
    """Definition of a single upsd command."""
    verb: str               # Verb and sub-verb, sent bare
    arg_count: int          # Number of quoted arguments that follow the verb
    list_reply: bool = False  # Reply is a BEGIN ... END block


# Commands this client speaks
COMMANDS: dict[str, NUTCommand] = {
    "USERNAME": NUTCommand("USERNAME", 1),
    "PASSWORD": NUTCommand("PASSWORD", 1),
    "LIST UPS": NUTCommand("LIST UPS", 0, list_reply=True),
    "LIST VAR": NUTCommand("LIST VAR", 1, list_reply=True),
    "GET VAR": NUTCommand("GET VAR", 2),
}


class ResponseKind(Enum):
    """Classification of a response line by its first token."""
    OK = MARKER_OK
    BEGIN = MARKER_BEGIN
    END = MARKER_END
    VAR = MARKER_VAR
    UPS = MARKER_UPS
    ERR = MARKER_ERR
    OTHER = None  # anything else; terminates list loops


_KIND_BY_MARKER = {kind.value: kind for kind in ResponseKind if kind.value}


def classify(line: str) -> ResponseKind:
    """Return the ResponseKind for ``line``."""
    return _KIND_BY_MARKER.get(split_tokens(line)[0], ResponseKind.OTHER)


def build_command(verb: str, *args: str) -> str:
    """Build ``VERB "arg1" "arg2"`` for a registered verb."""
    command = COMMANDS.get(verb)
    if command is None:
        raise ValueError(f"Unknown command: {verb!r}")
    if len(args) != command.arg_count:
        raise ValueError(
            f"{verb} takes {command.arg_count} argument(s), got {len(args)}")
    for arg in args:
        if "\n" in arg or "\r" in arg:
            raise ValueError(f"Argument must not contain a line break: {arg!r}")
    return " ".join([verb] + [quote(arg) for arg in args])


def expected_begin(verb: str, *args: str) -> str:
    """Header line that opens the list reply to ``verb``."""
    command = COMMANDS.get(verb)
    if command is None or not command.list_reply:
        raise ValueError(f"{verb!r} does not answer with a list")
    return f"{MARKER_BEGIN} {build_command(verb, *args)}"


def begin_variants(verb: str, *args: str) -> tuple[str, ...]:
    """Accepted list headers: quoted echo first, then upsd's bare echo."""
    quoted = expected_begin(verb, *args)
    bare = " ".join([MARKER_BEGIN, verb, *args])
    return (quoted,) if quoted == bare else (quoted, bare)


def row_prefixes(marker: str, ups_id: str) -> tuple[str, ...]:
    """Prefixes of list rows that belong to ``ups_id``."""
    return (f"{marker} {quote(ups_id)} ", f"{marker} {ups_id} ")


def parse_error(line: str) -> tuple[str, str]:
    """Split an ``ERR <code> [detail]`` line into (code, detail)."""
    tokens = split_tokens(line)
    code = tokens[1] if len(tokens) > 1 else ""
    detail = " ".join(tokens[2:])
    return code, detail


def describe_error(line: str) -> str:
    """Readable message for an ERR line."""
    code, detail = parse_error(line)
    desc = ERROR_DESCRIPTIONS.get(code, f"Unknown error: {code or line!r}")
    return f"{desc} ({detail})" if detail else desc
