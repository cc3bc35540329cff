#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Tests for the expression front end
==================================
Covers validation, implicit-AND insertion, postfix conversion, NOT collapsing,
tree building (including every error kind) and truth table enumeration.
"""

import pytest

from logic_expr import (
    And, Constant, ErrorKind, ExpressionError, Not, Or, Variable, Xor,
    assignment_for, build_tree, collapse_not_runs, evaluate, insert_and_markers,
    index_bits, minterms, parse_expression, postorder, run_program, to_infix, to_postfix,
    tree_depth, truth_table,
    validate_expression, variable_set,
)


# ---------- Validation ----------

@pytest.mark.parametrize("expr, position, desc", [
    ("A B", 1, "White space"),
    ("a", 0, "Lowercase variable"),
    ("A*B", 1, "Explicit AND marker is not part of the input alphabet"),
    ("AB2", 2, "Digit other than 0/1"),
    ("A&B", 1, "Foreign operator"),
])
def test_validate_rejects_characters(expr, position, desc):
    with pytest.raises(ExpressionError) as info:
        validate_expression(expr)
    assert info.value.kind is ErrorKind.INVALID_CHARACTER, desc
    assert info.value.position == position


def test_validate_empty():
    with pytest.raises(ExpressionError) as info:
        validate_expression("")
    assert info.value.kind is ErrorKind.EMPTY_EXPRESSION


def test_validate_accepts_full_alphabet():
    expr = "(AB'+A'B)'^C+10+XYZ"
    assert validate_expression(expr) == expr


def test_variable_set_sorted_and_distinct():
    assert variable_set("(CB'+A'B)'^C") == ["A", "B", "C"]
    assert variable_set("1^0") == []


def test_error_str_is_tagged():
    e = ExpressionError(ErrorKind.MALFORMED_EXPRESSION, "Invalid expression")
    assert str(e) == "[ERROR] Invalid expression"
    assert isinstance(e, ValueError)


# ---------- Normalizing ----------

@pytest.mark.parametrize("expr, expected, desc", [
    ("AB'+A'B", "A*B'+A'*B", "Letters after letters and primes"),
    ("(AB'+A'B)'^C", "(A*B'+A'*B)'^C", "Nothing after ^ or ("),
    ("A(B+C)", "A*(B+C)", "Parenthesis after a letter"),
    ("(A)(B)", "(A)*(B)", "Parenthesis after parenthesis"),
    ("10", "1*0", "Constants"),
    ("A+B^C", "A+B^C", "Operators only"),
    ("A", "A", "Single variable"),
    ("", "", "Empty"),
])
def test_insert_and_markers(expr, expected, desc):
    assert insert_and_markers(expr) == expected, desc


def test_insert_and_markers_only_inserts():
    expr = "(AB'+A'B)'^C"
    assert insert_and_markers(expr).replace("*", "") == expr


# ---------- Postfix ----------

@pytest.mark.parametrize("expr, expected, desc", [
    ("A*B'+A'*B", "AB'*A'B*+", "Sum of products"),
    ("A+B*C", "ABC*+", "AND binds tighter than OR"),
    ("A*B+C", "AB*C+", "AND popped by OR"),
    ("A+B^C", "ABC^+", "XOR binds tighter than OR"),
    ("A^B+C", "AB^C+", "XOR popped by OR"),
    ("A^B*C", "ABC*^", "AND binds tighter than XOR"),
    ("A+B+C", "ABC++", "Equal precedence is not popped"),
    ("(A+B)'", "AB+'", "NOT of a group"),
    ("(A+B)*C", "AB+C*", "Parentheses override precedence"),
    ("A''", "A", "Even NOT run cancels"),
    ("A'''", "A'", "Odd NOT run collapses to one"),
    ("1^0", "10^", "Constants"),
])
def test_to_postfix(expr, expected, desc):
    assert to_postfix(expr) == expected, desc


@pytest.mark.parametrize("expr, desc", [
    ("A+B)", "Unmatched closing parenthesis"),
    (")", "Lone closing parenthesis"),
    ("(A+B", "Unclosed opening parenthesis"),
])
def test_to_postfix_malformed(expr, desc):
    with pytest.raises(ExpressionError) as info:
        to_postfix(expr)
    assert info.value.kind is ErrorKind.MALFORMED_EXPRESSION, desc
    assert info.value.message == "Invalid expression"


def test_to_postfix_rejects_unknown_token():
    with pytest.raises(ExpressionError) as info:
        to_postfix("A&B")
    assert info.value.kind is ErrorKind.UNKNOWN_TOKEN


@pytest.mark.parametrize("postfix, expected", [
    ("A''B*", "AB*"),
    ("AB*'''", "AB*'"),
    ("''", ""),
    ("A'B'*", "A'B'*"),
    ("", ""),
])
def test_collapse_not_runs(postfix, expected):
    assert collapse_not_runs(postfix) == expected


# ---------- Tree building ----------

def test_build_tree_first_pop_is_left():
    assert build_tree("AB*") == And(Variable("B"), Variable("A"))
    assert build_tree("AB^") == Xor(Variable("B"), Variable("A"))
    assert build_tree("AB+") == Or(Variable("B"), Variable("A"))


def test_build_tree_leaves_and_not():
    assert build_tree("A'") == Not(Variable("A"))
    assert build_tree("1") == Constant(1)
    assert build_tree("0'") == Not(Constant(0))


@pytest.mark.parametrize("postfix, operator", [
    ("'", "NOT"),
    ("A*", "AND"),
    ("A^", "XOR"),
    ("A+", "OR"),
    ("+", "OR"),
])
def test_build_tree_missing_operands(postfix, operator):
    with pytest.raises(ExpressionError) as info:
        build_tree(postfix)
    assert info.value.kind is ErrorKind.INVALID_OPERATOR
    assert info.value.operator == operator
    assert info.value.message == f"Invalid {operator} logic"


def test_build_tree_excess_operands():
    with pytest.raises(ExpressionError) as info:
        build_tree("AB")
    assert info.value.kind is ErrorKind.EXCESS_OPERANDS
    assert info.value.message == "Invalid logic"


def test_build_tree_unknown_token():
    with pytest.raises(ExpressionError) as info:
        build_tree("A(")
    assert info.value.kind is ErrorKind.UNKNOWN_TOKEN


def test_build_tree_empty():
    with pytest.raises(ExpressionError) as info:
        build_tree("")
    assert info.value.kind is ErrorKind.EMPTY_EXPRESSION


@pytest.mark.parametrize("expr, kind, desc", [
    ("+A", ErrorKind.INVALID_OPERATOR, "OR without left operand"),
    ("'A", ErrorKind.INVALID_OPERATOR, "Leading NOT"),
    ("()", ErrorKind.EMPTY_EXPRESSION, "Empty parentheses"),
    ("A+B)", ErrorKind.MALFORMED_EXPRESSION, "Unmatched parenthesis"),
    ("A b", ErrorKind.INVALID_CHARACTER, "Bad character"),
])
def test_parse_expression_errors(expr, kind, desc):
    with pytest.raises(ExpressionError) as info:
        parse_expression(expr)
    assert info.value.kind is kind, desc


# ---------- Evaluation ----------

def test_postorder_operands_first():
    root = build_tree("AB*C+'")
    names = [type(n).__name__ for n in postorder(root)]
    assert names == ["Variable", "Variable", "Variable", "And", "Or", "Not"]
    assert run_program(postorder(root), {"A": 0, "B": 1, "C": 0}) == 1


def test_index_bits():
    assert index_bits(6, 3) == (1, 1, 0)
    assert index_bits(0, 0) == ()


def test_assignment_first_variable_is_msb():
    assert assignment_for(6, ["A", "B", "C"]) == {"A": 1, "B": 1, "C": 0}
    assert assignment_for(1, ["A", "B", "C"]) == {"A": 0, "B": 0, "C": 1}


def test_evaluate_operators():
    a, b = Variable("A"), Variable("B")
    for x in (0, 1):
        for y in (0, 1):
            env = {"A": x, "B": y}
            assert evaluate(And(a, b), env) == x & y
            assert evaluate(Or(a, b), env) == x | y
            assert evaluate(Xor(a, b), env) == x ^ y
            assert evaluate(Not(a), env) == 1 - x
    assert evaluate(Constant(0), {}) == 0


def test_truth_table_xor():
    root = parse_expression("AB'+A'B")
    rows = [(bits, y) for _, bits, y in truth_table(root, ["A", "B"])]
    assert rows == [((0, 0), 0), ((0, 1), 1), ((1, 0), 1), ((1, 1), 0)]
    assert minterms(root, ["A", "B"]) == [1, 2]


def test_truth_table_not_of_group_xor_c():
    root = parse_expression("(AB'+A'B)'^C")
    variables = variable_set("(AB'+A'B)'^C")
    rows = list(truth_table(root, variables))
    assert len(rows) == 8
    assert [index for index, _, _ in rows] == list(range(8))
    # Y = XNOR(A, B) ^ C
    assert minterms(root, variables) == [0, 3, 5, 6]
    assert isinstance(root, Xor)
    assert tree_depth(root) == 6


@pytest.mark.parametrize("expr, expected, desc", [
    ("A+A'", [0, 1], "Tautology"),
    ("AA'", [], "Contradiction"),
    ("A''", [1], "Double negation"),
    ("A0+B1", [1, 3], "Constants inside products"),
    ("A+BC", [3, 4, 5, 6, 7], "AND before OR"),
    ("A^BC", [3, 4, 5, 6], "AND before XOR"),
    ("(A+B)C", [3, 5, 7], "Group times variable"),
])
def test_minterms(expr, expected, desc):
    root = parse_expression(expr)
    assert minterms(root, variable_set(expr)) == expected, desc


# ---------- Formatting ----------

def test_to_infix_round_trip():
    for expr in ["(AB'+A'B)'^C", "A+BC", "A''B'", "(A+B)'(C^1)"]:
        root = parse_expression(expr)
        again = parse_expression(to_infix(root))
        variables = variable_set(expr)
        assert minterms(again, variables) == minterms(root, variables)


def test_to_infix_shape():
    assert to_infix(build_tree("AB*'")) == "(BA)'"
    assert to_infix(build_tree("AB+C^")) == "(C^(B+A))"


# ---------- Long chains ----------

def test_long_or_chain():
    expr = "+".join(["A"] * 1500)
    root = parse_expression(expr)
    assert tree_depth(root) == 1500
    assert evaluate(root, {"A": 0}) == 0
    assert evaluate(root, {"A": 1}) == 1
    assert minterms(root, ["A"]) == [1]


def test_long_chain_to_infix_round_trip():
    expr = "^".join(["AB'", "C", "A'"] * 400)
    root = parse_expression(expr)
    text = to_infix(root)
    assert text.count("^") == 1199
    variables = variable_set(expr)
    assert minterms(parse_expression(text), variables) == minterms(root, variables)


def test_deep_not_nesting():
    # built by hand: the parser would collapse a NOT run this long
    node = Variable("A")
    for _ in range(2001):
        node = Not(node)
    assert tree_depth(node) == 2002
    assert evaluate(node, {"A": 1}) == 0
    assert to_infix(node) == "A" + "'" * 2001
