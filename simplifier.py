#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logic Expression Simplifier
===========================
Reads a boolean expression, prints its truth table and minterms, and a
simplified sum-of-products form found with the Quine-McCluskey method.

Input
-----
- One expression on the command line, or typed at the prompt.
- Uppercase letters are variables, 0/1 constants, ' is NOT (postfix),
  ^ is XOR, + is OR, adjacency is AND.  No white space.
      (AB'+A'B)'^C

Output
------
    A B | Y
    0 0 | 0
    0 1 | 1
    ...
    Y = m( 1, 2)

    Y = A'B+AB'

Constant expressions (no variables) print their value only.

Run
---
$ python3 simplifier.py "(AB'+A'B)'^C"
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence

from colorama import init as colorama_init, Fore, Style

import logic_expr
from logic_expr import (
    ExpressionError, Node, build_tree, evaluate, index_bits, insert_and_markers, minterms,
    to_postfix, validate_expression, variable_set,
)
from qm_minimize import Implicant, PrimeTable, minimize, sop_str

# ---------- Configuration ----------

USE_COLOR = True                   # colour console output
SLOW_VARIABLE_COUNT = 20           # warn above this many variables


def paint(text: str, *styles: str) -> str:
    if not USE_COLOR or not styles:
        return text
    return "".join(styles) + text + Style.RESET_ALL


# ---------- Analysis ----------

@dataclass
class Analysis:
    """Everything computed for one expression.

    On failure only ``expression`` and ``error`` are set.
    """
    expression: str
    normalized: str = ""
    postfix: str = ""
    variables: List[str] = field(default_factory=list)
    root: Optional[Node] = None
    constant: Optional[int] = None
    minterms: List[int] = field(default_factory=list)
    primes: PrimeTable = field(default_factory=dict)
    cover: List[Implicant] = field(default_factory=list)
    simplified: str = ""
    error: Optional[ExpressionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_constant(self) -> bool:
        return self.ok and not self.variables


def analyze(expr: str) -> Analysis:
    """Run the whole pipeline on expr; bad input comes back as a failed Analysis."""
    try:
        validate_expression(expr)
        normalized = insert_and_markers(expr)
        postfix = to_postfix(normalized)
        root = build_tree(postfix)
    except ExpressionError as e:
        return Analysis(expression=expr, error=e)

    result = Analysis(expression=expr, normalized=normalized, postfix=postfix,
                      variables=variable_set(expr), root=root)
    if not result.variables:
        result.constant = evaluate(root, {})
        result.simplified = str(result.constant)
        return result

    result.minterms = minterms(root, result.variables)
    result.primes, result.cover = minimize(len(result.variables), result.minterms)
    result.simplified = sop_str(result.cover, result.variables)
    return result


# ---------- Rendering ----------

def format_minterms(ms: Sequence[int]) -> str:
    return "Y = m(" + ",".join(f" {m}" for m in ms) + ")"


def truth_table_lines(result: Analysis) -> Iterator[str]:
    """Table rows rebuilt from result.minterms; the tree is not evaluated again."""
    yield paint(" ".join(result.variables) + " | Y", Style.BRIGHT, Fore.CYAN)
    ms = set(result.minterms)
    n = len(result.variables)
    for index in range(1 << n):
        y = paint("1", Fore.GREEN) if index in ms else "0"
        bits = index_bits(index, n)
        yield " ".join(str(b) for b in bits) + " | " + y


def prime_lines(result: Analysis) -> Iterator[str]:
    for i, (p, cov) in enumerate(result.primes.items()):
        mark = "*" if p in result.cover else " "
        yield f"  {mark} p{i}: {p} ({','.join(str(m) for m in sorted(cov))})"


def print_result(result: Analysis, *, show_table: bool = True, show_primes: bool = False):
    print()
    if result.is_constant:
        print(paint("Constant expression:", Fore.CYAN))
        print(f"Y = {paint(result.simplified, Style.BRIGHT)}")
        return

    if show_table:
        for line in truth_table_lines(result):
            print(line)
        print()
    print(format_minterms(result.minterms))
    print()
    if show_primes and result.primes:
        print(paint("Prime implicants (* = selected):", Fore.MAGENTA))
        for line in prime_lines(result):
            print(line)
        print()
    print(f"Y = {paint(result.simplified, Style.BRIGHT, Fore.GREEN)}")


def print_error(error: ExpressionError):
    print(paint(str(error), Fore.RED, Style.BRIGHT), file=sys.stderr)


# ---------- CLI ----------

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logic-simplifier",
        description="Truth table, minterms and simplified sum of products of a boolean expression")
    parser.add_argument("expression", nargs="?",
                        help="expression such as \"(AB'+A'B)'^C\" (prompted for when omitted)")
    parser.add_argument("--no-table", action="store_true", help="do not print the truth table")
    parser.add_argument("--primes", action="store_true", help="also list the prime implicants")
    parser.add_argument("--no-color", action="store_true", help="plain output without colours")
    parser.add_argument("--verbose", action="store_true", help="emit progress info")
    return parser


def read_expression() -> str:
    try:
        return input(paint("Input expression: ", Fore.YELLOW)).strip()
    except EOFError:
        return ""


def main(argv: Optional[Sequence[str]] = None) -> int:
    global USE_COLOR
    args = build_parser().parse_args(argv)
    USE_COLOR = not args.no_color
    logic_expr.VERBOSE = args.verbose

    expr = args.expression if args.expression is not None else read_expression()

    n = len(variable_set(expr))
    if n > SLOW_VARIABLE_COUNT:
        print(paint(f"[warning] {n} variables: {1 << n} rows to evaluate, this will take a while",
                    Fore.YELLOW))

    result = analyze(expr)
    if not result.ok:
        print_error(result.error)
        return 1
    print_result(result, show_table=not args.no_table, show_primes=args.primes)
    return 0


def cli():
    colorama_init()
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.")


if __name__ == "__main__":
    cli()
