#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logic Expression Front End
==========================
Turns a single-line boolean expression into an expression tree and enumerates
its truth table.

Grammar
-------
- Variables are single uppercase letters A..Z.
- Constants are 0 and 1.
- a' means NOT a (postfix prime, may be repeated: a'' == a).
- Adjacency means AND:  AB'  ==  A * B'
- ^ is XOR, + is OR.
- Precedence, tightest first:  NOT > AND > XOR > OR.  Parentheses group.
- No whitespace.  Example:  (AB'+A'B)'^C

Pipeline
--------
  validate_expression  ->  insert_and_markers  ->  to_postfix
  ->  build_tree  ->  truth_table / minterms

Bit order
---------
Variables are always taken in ascending letter order.  The first variable is the
most significant bit of an assignment index, so for variables A, B, C the index
6 (binary 110) means A=1, B=1, C=0.
"""

from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union

# ---------- Configuration / Diagnostics ----------

VERBOSE = False                    # emit progress info
PROGRESS_INTERVAL = 65536          # truth table rows between status prints

ALLOWED_CHARS = frozenset(string.ascii_uppercase + "()+'^01")

AND, OR, XOR, NOT = "*", "+", "^", "'"
OPEN, CLOSE = "(", ")"

# Lower number binds looser; "(" sits below every operator so it is never popped
# by one.
PRECEDENCE: Mapping[str, int] = {OPEN: 1, OR: 2, XOR: 3, AND: 4, NOT: 5}

OPERATOR_NAMES: Mapping[str, str] = {NOT: "NOT", AND: "AND", XOR: "XOR", OR: "OR"}


def log(msg: str):
    if VERBOSE:
        print(f"[info] {msg}")


def progress(kind: str, count: int, total: Optional[int] = None):
    if not VERBOSE:
        return
    if count % PROGRESS_INTERVAL != 0:
        return
    if total is not None:
        print(f"[working] {kind}: {count}/{total} ...", flush=True)
    else:
        print(f"[working] {kind}: {count} ...", flush=True)


# ---------- Errors ----------

class ErrorKind(Enum):
    MALFORMED_EXPRESSION = "malformed expression"
    INVALID_OPERATOR = "invalid operator"
    EXCESS_OPERANDS = "excess operands"
    UNKNOWN_TOKEN = "unknown token"
    INVALID_CHARACTER = "invalid character"
    EMPTY_EXPRESSION = "empty expression"


class ExpressionError(ValueError):
    """A classified failure while reading an expression.

    ``kind`` says which stage rejected the input, ``operator`` is set for
    INVALID_OPERATOR ("NOT", "AND", "XOR" or "OR") and ``position`` for
    INVALID_CHARACTER.
    """

    def __init__(self, kind: ErrorKind, message: str, *,
                 operator: Optional[str] = None, position: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.operator = operator
        self.position = position

    def __str__(self) -> str:
        return f"[ERROR] {self.message}"


# ---------- Expression tree ----------

@dataclass(frozen=True)
class Constant:
    value: int


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class Not:
    child: "Node"


@dataclass(frozen=True)
class And:
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Or:
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Xor:
    left: "Node"
    right: "Node"


Node = Union[Constant, Variable, Not, And, Or, Xor]
Assignment = Mapping[str, int]     # letter -> 0/1
Row = Tuple[int, Tuple[int, ...], int]   # (index, bits MSB first, Y)

BINARY_NODES = {AND: And, XOR: Xor, OR: Or}


# ---------- Validation ----------

def validate_expression(expr: str) -> str:
    """Check every character against the grammar alphabet and return expr.

    Raises ExpressionError(INVALID_CHARACTER) for the first offending character
    and ExpressionError(EMPTY_EXPRESSION) for an empty line.
    """
    if not expr:
        raise ExpressionError(ErrorKind.EMPTY_EXPRESSION, "Empty expression")
    for i, ch in enumerate(expr):
        if ch not in ALLOWED_CHARS:
            raise ExpressionError(ErrorKind.INVALID_CHARACTER,
                                  f"Invalid character '{ch}' at position {i}",
                                  position=i)
    return expr


def variable_set(expr: str) -> List[str]:
    """Distinct variable letters of expr in ascending order."""
    return sorted({ch for ch in expr if ch in string.ascii_uppercase})


# ---------- Normalizing & Parsing ----------

def is_operand(ch: str) -> bool:
    return ch in string.ascii_uppercase or ch in "01"


def insert_and_markers(expr: str) -> str:
    """Make implicit AND explicit:  AB'(C+D)  ->  A*B'*(C+D)."""
    if not expr:
        return ""
    out = [expr[0]]
    for prev, cur in zip(expr, expr[1:]):
        if (cur in string.ascii_uppercase or cur.isdigit() or cur == OPEN) \
                and prev not in (OPEN, OR, XOR):
            out.append(AND)
        out.append(cur)
    return "".join(out)


def collapse_not_runs(postfix: str) -> str:
    """Replace each run of NOT markers by its parity: A''' -> A', A'' -> A."""
    out: List[str] = []
    run = 0
    for tok in postfix:
        if tok == NOT:
            run += 1
            continue
        if run & 1:
            out.append(NOT)
        out.append(tok)
        run = 0
    if run & 1:
        out.append(NOT)
    return "".join(out)


def to_postfix(expr: str) -> str:
    """
    Shunting-yard conversion of a normalized expression to postfix.

    An incoming operator pops every stacked operator that binds strictly tighter
    than itself, then is pushed.  Runs of NOT markers in the result are
    collapsed by parity.
    """
    out: List[str] = []
    stack: List[str] = []
    for ch in expr:
        if is_operand(ch):
            out.append(ch)
        elif ch == OPEN:
            stack.append(ch)
        elif ch == CLOSE:
            while stack and stack[-1] != OPEN:
                out.append(stack.pop())
            if not stack:
                raise ExpressionError(ErrorKind.MALFORMED_EXPRESSION, "Invalid expression")
            stack.pop()
        elif ch in OPERATOR_NAMES:
            while stack and PRECEDENCE[stack[-1]] > PRECEDENCE[ch]:
                out.append(stack.pop())
            stack.append(ch)
        else:
            raise ExpressionError(ErrorKind.UNKNOWN_TOKEN, f"Invalid token '{ch}'")
    while stack:
        tok = stack.pop()
        if tok == OPEN:
            raise ExpressionError(ErrorKind.MALFORMED_EXPRESSION, "Invalid expression")
        out.append(tok)
    return collapse_not_runs("".join(out))


# ---------- Tree building ----------

def build_tree(postfix: str) -> Node:
    """
    Build the expression tree from a postfix string.

    For a binary operator the first node popped becomes the left child and the
    second the right child.  Nodes built so far only live on the local stack,
    so nothing outlives a failure.
    """
    stack: List[Node] = []
    for tok in postfix:
        if tok in string.ascii_uppercase:
            stack.append(Variable(tok))
        elif tok in "01":
            stack.append(Constant(int(tok)))
        elif tok == NOT:
            if len(stack) < 1:
                raise ExpressionError(ErrorKind.INVALID_OPERATOR, "Invalid NOT logic",
                                      operator="NOT")
            stack.append(Not(stack.pop()))
        elif tok in BINARY_NODES:
            if len(stack) < 2:
                name = OPERATOR_NAMES[tok]
                raise ExpressionError(ErrorKind.INVALID_OPERATOR, f"Invalid {name} logic",
                                      operator=name)
            left = stack.pop()
            right = stack.pop()
            stack.append(BINARY_NODES[tok](left, right))
        else:
            raise ExpressionError(ErrorKind.UNKNOWN_TOKEN, f"Invalid token '{tok}'")
    if len(stack) > 1:
        raise ExpressionError(ErrorKind.EXCESS_OPERANDS, "Invalid logic")
    if not stack:
        raise ExpressionError(ErrorKind.EMPTY_EXPRESSION, "Empty expression")
    return stack[0]


def parse_expression(expr: str) -> Node:
    """Validate, normalize, convert and build in one go.

    For callers that only need the tree; analyze() in simplifier.py keeps the
    intermediate strings and runs the steps itself.
    """
    validate_expression(expr)
    return build_tree(to_postfix(insert_and_markers(expr)))


# ---------- Evaluation ----------
#
# A chain like A+B+C+... nests one level per operator, so every tree walk
# below uses an explicit stack instead of recursion.

def postorder(root: Node) -> List[Node]:
    """Flatten a tree into operand-first order (left subtree, right subtree, node)."""
    order: List[Node] = []
    stack: List[Tuple[Node, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded or isinstance(node, (Constant, Variable)):
            order.append(node)
            continue
        stack.append((node, True))
        if isinstance(node, Not):
            stack.append((node.child, False))
        elif isinstance(node, (And, Or, Xor)):
            stack.append((node.right, False))
            stack.append((node.left, False))
        else:
            raise TypeError(f"Not an expression node: {node!r}")
    return order


def run_program(program: List[Node], assignment: Assignment) -> int:
    """Evaluate a postorder node list on a value stack."""
    values: List[int] = []
    for node in program:
        if isinstance(node, Constant):
            values.append(node.value)
        elif isinstance(node, Variable):
            values.append(assignment[node.name])
        elif isinstance(node, Not):
            values.append(values.pop() ^ 1)
        else:
            right = values.pop()
            left = values.pop()
            if isinstance(node, And):
                values.append(left & right)
            elif isinstance(node, Or):
                values.append(left | right)
            else:
                values.append(left ^ right)
    return values[0]


def evaluate(node: Node, assignment: Assignment) -> int:
    return run_program(postorder(node), assignment)


def assignment_for(index: int, variables: List[str]) -> Dict[str, int]:
    """Bind each variable to its bit of index (first variable = MSB)."""
    n = len(variables)
    return {v: (index >> (n - 1 - i)) & 1 for i, v in enumerate(variables)}


def index_bits(index: int, n: int) -> Tuple[int, ...]:
    """The n bits of index, most significant first."""
    return tuple((index >> (n - 1 - i)) & 1 for i in range(n))


def truth_table(root: Node, variables: List[str]) -> Iterator[Row]:
    """Yield (index, bits, Y) for every assignment, in ascending index order."""
    program = postorder(root)
    n = len(variables)
    total = 1 << n
    for index in range(total):
        progress("truth table", index, total)
        yield index, index_bits(index, n), run_program(program, assignment_for(index, variables))


def minterms(root: Node, variables: List[str]) -> List[int]:
    """Ascending list of assignment indices where the expression is 1."""
    found = [index for index, _, value in truth_table(root, variables) if value]
    log(f"{len(found)} minterm(s) over {len(variables)} variable(s)")
    return found


# ---------- Formatting ----------

def to_infix(node: Node) -> str:
    """Render a tree back into the input grammar, every binary node parenthesized."""
    parts: List[str] = []
    for item in postorder(node):
        if isinstance(item, Constant):
            parts.append(str(item.value))
        elif isinstance(item, Variable):
            parts.append(item.name)
        elif isinstance(item, Not):
            parts.append(parts.pop() + NOT)
        else:
            right = parts.pop()
            left = parts.pop()
            op = "" if isinstance(item, And) else XOR if isinstance(item, Xor) else OR
            parts.append(f"({left}{op}{right})")
    return parts[0]


def tree_depth(node: Node) -> int:
    """Number of nodes on the longest root-to-leaf path."""
    depths: List[int] = []
    for item in postorder(node):
        if isinstance(item, (Constant, Variable)):
            depths.append(1)
        elif isinstance(item, Not):
            depths.append(depths.pop() + 1)
        else:
            right = depths.pop()
            depths.append(max(depths.pop(), right) + 1)
    return depths[0]
