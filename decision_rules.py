#!/usr/bin/env python3
"""
decision_rules.py — CLI narzędzie DecisionRules.

Działa całkowicie lokalnie — nie wymaga uruchomionego serwera API.

Podkomendy:
    eval    — oblicz wynik reguły dla podanych zmiennych
    parse   — pokaż kanoniczne AST reguły
    tokens  — pokaż tokeny reguły
    check   — sprawdź tylko składnię reguły

Użycie:
    python decision_rules.py eval --rule "IF (x == 99) RETURN 10 ELSE RETURN 8" --vars "x=99"
    python decision_rules.py eval --file rule.txt --vars "x=1; y=2" --trace
    python decision_rules.py parse --rule "IF ((x > 0) AND y < 3) RETURN 1 ELSE RETURN 0"
    python decision_rules.py tokens --file rule.txt
    python decision_rules.py check --file rule.txt
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

import engine
from adapters.assignment_parser import parse_assignments
from config import Settings
from contracts import (
    Expression,
    GroupNode,
    LogicalNode,
    MissingNode,
    RelationalNode,
    RuleError,
    RuleProgram,
    Token,
)


# -- helpers ---------------------------------------------------------------

_CONSOLE: Console | None = None


def _console() -> Console:
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console(highlight=False)
    return _CONSOLE


def _fail(message: str) -> None:
    print(f"Błąd: {message}", file=sys.stderr)
    sys.exit(1)


def _read_rule(args: argparse.Namespace) -> str:
    if getattr(args, "file", None):
        try:
            return open(args.file, encoding="utf-8").read()
        except OSError as e:
            _fail(f"odczyt pliku: {e}")
    text = getattr(args, "rule", None) or sys.stdin.read()
    if not text.strip():
        _fail("podaj regułę przez --rule, --file lub stdin")
    return text


def _print_kv_table(title: str, rows: list[tuple[str, Any]]) -> None:
    table = Table(title=title, box=box.ASCII, show_header=False, pad_edge=False)
    table.add_column("Key", no_wrap=True, style="bold cyan")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    _console().print(table)


def _print_tokens_table(tokens: list[Token]) -> None:
    table = Table(title=f"Tokens [{len(tokens)}]", box=box.ASCII)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("Kind", no_wrap=True, style="cyan")
    table.add_column("Text")
    table.add_column("Line", justify="right", no_wrap=True)
    table.add_column("Col", justify="right", no_wrap=True)
    for idx, tok in enumerate(tokens):
        table.add_row(str(idx), tok.kind.value, tok.text, str(tok.line), str(tok.col))
    _console().print(table)


def _expression_label(expr: Expression) -> str:
    if isinstance(expr, RelationalNode):
        return f"{expr.identifier} {expr.op} {expr.value}"
    if isinstance(expr, MissingNode):
        return f"IS-MISSING({expr.identifier})"
    if isinstance(expr, LogicalNode):
        return expr.op
    return "( )"


def _add_expression(tree: Tree, expr: Expression) -> None:
    pending: list[tuple[Tree, Expression]] = [(tree, expr)]
    while pending:
        parent, node = pending.pop()
        branch = parent.add(_expression_label(node))
        if isinstance(node, LogicalNode):
            # stos: prawa strona zdjęta po lewej
            pending.append((branch, node.right))
            pending.append((branch, node.left))
        elif isinstance(node, GroupNode):
            pending.append((branch, node.expression))


def _print_program_tree(program: RuleProgram) -> None:
    root = Tree("RuleProgram")
    for idx, clause in enumerate(program.clauses):
        branch = root.add(f"IF #{idx} → RETURN {clause.value}")
        _add_expression(branch, clause.condition)
    root.add(f"ELSE → RETURN {program.otherwise.value}")
    _console().print(root)


# -- podkomendy ------------------------------------------------------------

def _eval(args: argparse.Namespace, settings: Settings) -> None:
    rule = _read_rule(args)
    env = parse_assignments(args.vars or "")
    result = engine.evaluate_rule(rule, env)

    if args.trace or settings.trace_evaluation:
        for step in result.steps:
            _console().print(f"  {step}")

    if args.quiet:
        print(result.value)
        return

    selected = "ELSE" if result.selected is None else f"IF #{result.selected}"
    _print_kv_table("Result", [
        ("value", result.value),
        ("selected", selected),
        ("true clauses", ", ".join(
            f"#{o.index}" for o in result.outcomes if o.matched
        ) or "-"),
    ])


def _parse(args: argparse.Namespace, settings: Settings) -> None:
    _print_program_tree(engine.parse(_read_rule(args)))


def _tokens(args: argparse.Namespace, settings: Settings) -> None:
    _print_tokens_table(engine.tokenize(_read_rule(args)))


def _check(args: argparse.Namespace, settings: Settings) -> None:
    program = engine.parse(_read_rule(args))
    print(f"OK: {len(program.clauses)} klauzul IF + ELSE.")


# -- main ------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(
        prog="decision_rules",
        description="DecisionRules — CLI (lokalny, bez serwera API)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def _rule_source(p: argparse.ArgumentParser) -> None:
        p.add_argument("--rule", "-r", help="Tekst reguły (lub stdin)")
        p.add_argument("--file", "-f", help="Ścieżka do pliku z regułą")

    # eval
    p = sub.add_parser("eval", help="Oblicz wynik reguły")
    _rule_source(p)
    p.add_argument("--vars", "-v", default="",
                   help='Przypisania zmiennych, np. "x=1; y=2"')
    p.add_argument("--trace", action="store_true",
                   help="Wyświetl kroki ewaluacji")
    p.add_argument("--quiet", "-q", action="store_true",
                   help="Tylko wynik, bez tabeli")

    # parse
    p = sub.add_parser("parse", help="Pokaż kanoniczne AST reguły")
    _rule_source(p)

    # tokens
    p = sub.add_parser("tokens", help="Pokaż tokeny reguły")
    _rule_source(p)

    # check
    p = sub.add_parser("check", help="Sprawdź składnię reguły")
    _rule_source(p)

    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    cmds = {
        "eval":   _eval,
        "parse":  _parse,
        "tokens": _tokens,
        "check":  _check,
    }

    try:
        cmds[args.command](args, settings)
    except RuleError as exc:
        _fail(f"[{exc.kind}] {exc.message}")


if __name__ == "__main__":
    main()
