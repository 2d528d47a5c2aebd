import random
import re
import unittest
from fractions import Fraction
from math import trunc

from bytecalc import evaluate


def reference(text):
    """Direct recursive evaluation of the grammar, without bytecode. Raises ZeroDivisionError."""
    tokens = re.findall(r"\d+|[-+*/()]", text)
    pos = 0

    def peek():
        return tokens[pos] if pos < len(tokens) else None

    def expr():
        nonlocal pos
        value = term()
        while peek() in ("+", "-"):
            op = tokens[pos]
            pos += 1
            right = term()
            value = value + right if op == "+" else value - right
        return value

    def term():
        nonlocal pos
        value = factor()
        while peek() in ("*", "/"):
            op = tokens[pos]
            pos += 1
            right = factor()
            value = value * right if op == "*" else trunc(Fraction(value, right))
        return value

    def factor():
        nonlocal pos
        token = tokens[pos]
        pos += 1
        if token == "(":
            value = expr()
            pos += 1  # ")"
            return value
        return int(token)

    return expr()


def generate(rng, depth=0):
    """Random well-formed expression with small literals and at most a handful of operators."""
    if depth > 2 or rng.random() < 0.3:
        return str(rng.randint(0, 20))
    left, right = generate(rng, depth + 1), generate(rng, depth + 1)
    op = rng.choice("+-*/")
    text = f"{left} {op} {right}"
    return f"({text})" if rng.random() < 0.5 else text


class PipelineTestCase(unittest.TestCase):

    def test_scenarios(self):
        program, value = evaluate("3+4*2")
        self.assertEqual(["PUSH 3", "PUSH 4", "PUSH 2", "MUL", "ADD"], [str(inst) for inst in program])
        self.assertEqual(11, value)

        program, value = evaluate("(3+4)*2")
        self.assertEqual(["PUSH 3", "PUSH 4", "ADD", "PUSH 2", "MUL"], [str(inst) for inst in program])
        self.assertEqual(14, value)

    def test_matches_reference(self):
        rng = random.Random(1234)
        checked = 0
        for __ in range(500):
            case = generate(rng)
            try:
                expected = reference(case)
            except ZeroDivisionError:
                continue
            self.assertEqual(expected, evaluate(case, bits=64)[1], case)
            checked += 1
        self.assertGreater(checked, 100)

    def test_precedence_and_associativity(self):
        cases = {
            "2+3*4": 14,
            "2*3+4": 10,
            "20-6/3": 18,
            "20/4*5": 25,
            "20/(4*5)": 1,
            "10-4-3": 3,
            "10-(4-3)": 9,
            "64/4/2": 8,
            "64/(4/2)": 32,
        }
        for case, result in cases.items():
            self.assertEqual(result, evaluate(case)[1], case)
            self.assertEqual(reference(case), evaluate(case)[1], case)


if __name__ == '__main__':
    unittest.main()
