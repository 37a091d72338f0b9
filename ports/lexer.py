"""
Port: Lexer
Odpowiedzialność: zamiana tekstu reguły na sekwencję tokenów.
"""
from typing import Protocol, runtime_checkable

from contracts import Token


@runtime_checkable
class Lexer(Protocol):
    def tokenize(self, text: str) -> list[Token]:
        """
        Splits rule text into tokens, in source order.
        Whitespace separates tokens and is never returned.
        Keywords (IF, ELSE, AND, OR, RETURN, IS-MISSING, ==) win over
        the identifier pattern.
        Raises LexError on an unrecognized character.
        """
        ...
