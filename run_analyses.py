#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Analysis Runner - Simplify many expressions in one go
=====================================================
Non-interactive companion of simplifier.py.  Runs the full pipeline on every
expression given on the command line or listed in a file and prints a summary
report.

Usage:
    python3 run_analyses.py [expression ...]
    python3 run_analyses.py --file expressions.txt --save

File format: one expression per line, blank lines and lines starting with '#'
are ignored.  If no expression is given, a few demo expressions are used.
"""

import argparse
import datetime
import sys
from typing import List, Optional, Sequence

from logic_expr import to_infix, tree_depth
from qm_minimize import count_literals, cover_value
from simplifier import Analysis, analyze, format_minterms


def demo_expressions() -> List[str]:
    return ["AB'+A'B", "(AB'+A'B)'^C", "A'B'C+A'BC+AB'C+ABC'", "AB+AC+BC'", "1^0"]


def read_expressions(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8") as fh:
        return [ln.strip() for ln in fh if ln.strip() and not ln.strip().startswith("#")]


def cover_matches(result: Analysis) -> bool:
    """True if the selected cover is 1 on exactly the minterms of the expression."""
    ms = set(result.minterms)
    return all(cover_value(result.cover, index) == (index in ms)
               for index in range(1 << len(result.variables)))


def run_all_analyses(expressions: Sequence[str]) -> List[Analysis]:
    """Analyze every expression, printing one section per expression."""
    results = []
    for expr in expressions:
        print(f"Analyzing: {expr}")
        print("-" * 40)
        result = analyze(expr)
        if not result.ok:
            print(f"Error: {result.error.message} ({result.error.kind.value})")
        elif result.is_constant:
            print(f"Constant expression: Y = {result.constant}")
        else:
            print(f"Variables: {', '.join(result.variables)}")
            print(f"Postfix:   {result.postfix}")
            print(f"Tree:      {to_infix(result.root)}  (depth {tree_depth(result.root)})")
            print(format_minterms(result.minterms))
            print(f"Prime implicants: {len(result.primes)}")
            print(f"Y = {result.simplified}")
            print(f"Verified:  {'yes' if cover_matches(result) else 'NO'}")
        print()
        results.append(result)
    return results


def generate_summary_report(results: Sequence[Analysis]) -> str:
    """Generate a summary report of all analyses"""

    if not results:
        return "No results to report"

    simplified = [r for r in results if r.ok and not r.is_constant]
    constants = [r for r in results if r.is_constant]
    failed = [r for r in results if not r.ok]

    report = []
    report.append("LOGIC EXPRESSION SUMMARY REPORT")
    report.append("=" * 50)
    report.append(f"Generated: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    report.append(f"Expressions: {len(results)}")
    report.append(f"Simplified: {len(simplified)}")
    report.append(f"Constant: {len(constants)}")
    report.append(f"Failed: {len(failed)}")
    report.append("")

    for r in results:
        report.append(f"Expression: {r.expression}")
        if not r.ok:
            report.append(f"  Error: {r.error.message}")
        elif r.is_constant:
            report.append(f"  Y = {r.constant} (constant)")
        else:
            report.append(f"  Variables: {len(r.variables)}  Minterms: {len(r.minterms)}  "
                          f"Terms: {len(r.cover)}  Literals: {count_literals(r.cover)}")
            report.append(f"  Y = {r.simplified}")
            if not cover_matches(r):
                report.append("  Warning: cover does not match the truth table")
        report.append("")

    report.append("Analysis Complete")
    report.append("=" * 50)

    return "\n".join(report)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logic-batch",
                                     description="Simplify several boolean expressions and report")
    parser.add_argument("expressions", nargs="*", help="expressions to analyze")
    parser.add_argument("--file", help="read expressions from this file, one per line")
    parser.add_argument("--save", action="store_true", help="save the summary report to a file")
    parser.add_argument("--output", help="report file name (implies --save)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    expressions = list(args.expressions)
    if args.file:
        expressions += read_expressions(args.file)
    if not expressions:
        expressions = demo_expressions()
        print("No expression provided, using demo expressions:")
        print(f"Demo: {', '.join(expressions)}")
        print()

    results = run_all_analyses(expressions)
    summary = generate_summary_report(results)
    print("=" * 80)
    print(summary)

    if args.save or args.output:
        report_filename = args.output or \
            f"simplify_summary_{datetime.datetime.now().strftime('%Y%m%d_%H%M%S')}.txt"
        with open(report_filename, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"\nSummary report saved to: {report_filename}")

    return 1 if any(not r.ok for r in results) else 0


def cli():
    try:
        raise SystemExit(main())
    except KeyboardInterrupt:
        print("\nAnalysis interrupted by user")
        sys.exit(1)


if __name__ == "__main__":
    cli()
