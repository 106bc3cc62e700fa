"""Tokenizing and quoting helpers for NUT protocol lines.

Lines are split on single spaces with empty tokens kept, because the
position of each token is what identifies it. Quoted values that contain
spaces come back as several tokens and are rejoined by ``unquote_join``.
Embedded double quotes are neither escaped nor unescaped.
"""

from nut_client.protocol.constants import QUOTE


def quote(text: str) -> str:
    """Wrap ``text`` in double quotes."""
    return f"{QUOTE}{text}{QUOTE}"


def split_tokens(line: str) -> list[str]:
    """Split on single spaces, keeping empty tokens in place."""
    return line.split(" ")


def unquote(token: str) -> str:
    """Strip one surrounding pair of double quotes, if both are present."""
    if len(token) >= 2 and token.startswith(QUOTE) and token.endswith(QUOTE):
        return token[1:-1]
    return token


def unquote_join(tokens: list[str], from_index: int) -> str:
    """Rejoin ``tokens[from_index:]`` with spaces and strip one quote pair."""
    return unquote(" ".join(tokens[from_index:]))


def token_width(identifier: str) -> int:
    """Number of tokens ``identifier`` occupies in a response line."""
    return len(split_tokens(identifier))
