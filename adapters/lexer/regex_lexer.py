"""
Adapter: RegexLexer
Implementuje port Lexer — jeden skompilowany regex z nazwanymi grupami.

Kolejność alternatyw ma znaczenie:
  - operatory dwuznakowe przed jednoznakowymi (">=" przed ">")
  - "IS-MISSING" przed identyfikatorem (myślnik nie należy do identyfikatora),
    ale tylko jako całe słowo: "IS-MISSINGS" nie jest predykatem
  - słowa kluczowe rozpoznawane po dopasowaniu całego słowa, więc "IFFY"
    pozostaje identyfikatorem, a "IF" nie
"""
from __future__ import annotations

import re

from contracts import LexError, Token, TokenKind

_TOKEN_RE = re.compile(
    r'(?P<WS>[ \t\r\n]+)'
    r'|(?P<LPAREN>\()'
    r'|(?P<RPAREN>\))'
    r'|(?P<GTE>>=)'
    r'|(?P<LTE><=)'
    r'|(?P<GT>>)'
    r'|(?P<LT><)'
    r'|(?P<EQ>==)'
    r'|(?P<IS_MISSING>IS-MISSING(?![_a-zA-Z0-9]))'
    r'|(?P<NUMBER>[0-9]+)'
    r'|(?P<WORD>[a-zA-Z]+[_a-zA-Z0-9]*)'
)

# Słowa kluczowe mają pierwszeństwo przed identyfikatorem
_KEYWORDS: dict[str, TokenKind] = {
    "IF": TokenKind.IF,
    "ELSE": TokenKind.ELSE,
    "AND": TokenKind.AND,
    "OR": TokenKind.OR,
    "RETURN": TokenKind.RETURN,
    "IGUALQUE": TokenKind.EQ,   # słowny zapis "=="
}


class RegexLexer:
    """Bezstanowy lekser reguł; jedna instancja może być współdzielona."""

    # -- Lexer protocol ----------------------------------------------------

    def tokenize(self, text: str) -> list[Token]:
        tokens: list[Token] = []
        pos = 0
        line, line_start = 1, 0

        while pos < len(text):
            m = _TOKEN_RE.match(text, pos)
            if m is None:
                raise LexError(
                    position=pos,
                    line=line,
                    col=pos - line_start + 1,
                    char=text[pos],
                )

            group = m.lastgroup
            lexeme = m.group()
            col = pos - line_start + 1

            if group == "WS":
                newlines = lexeme.count("\n")
                if newlines:
                    line += newlines
                    line_start = pos + lexeme.rindex("\n") + 1
            else:
                if group == "WORD":
                    kind = _KEYWORDS.get(lexeme, TokenKind.IDENTIFIER)
                else:
                    kind = TokenKind(group)
                tokens.append(
                    Token(kind=kind, text=lexeme, offset=pos, line=line, col=col)
                )

            pos = m.end()

        return tokens
