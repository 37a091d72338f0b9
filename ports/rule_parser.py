"""
Port: RuleParser
Odpowiedzialność: budowa AST programu reguł z sekwencji tokenów.
"""
from typing import Protocol, runtime_checkable

from contracts import RuleProgram, Token


@runtime_checkable
class RuleParser(Protocol):
    def parse_tokens(self, tokens: list[Token]) -> RuleProgram:
        """
        Builds a raw RuleProgram (IfClause+ followed by one ElseClause).
        Nested parentheses are kept as GroupNode wrappers; run the Reducer
        to obtain the canonical tree.
        Raises RuleSyntaxError on empty input, trailing tokens or when no
        grammar rule matches the current position.
        """
        ...

    def parse(self, text: str) -> RuleProgram:
        """
        Tokenizes and parses rule text in one step.
        Raises LexError or RuleSyntaxError.
        """
        ...
