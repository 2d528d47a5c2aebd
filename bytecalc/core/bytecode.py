"""Instruction set for the bytecalc virtual machine. Programs are straight-line: there are no jumps or labels, so
execution is a single pass from the first instruction to the last.
"""

from dataclasses import dataclass
from enum import Enum


class OpCode(Enum):
    PUSH = "push"
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


@dataclass(frozen=True)
class Instruction:
    """One VM instruction. Only PUSH carries an operand."""
    opcode: OpCode
    operand: int = None

    def __post_init__(self):
        if (self.opcode is OpCode.PUSH) != (self.operand is not None):
            raise ValueError(f"{self.opcode.name} {'requires' if self.opcode is OpCode.PUSH else 'takes no'} operand")

    def __str__(self):
        if self.opcode is OpCode.PUSH:
            return f"{self.opcode.name} {self.operand}"
        return self.opcode.name


class Program:
    """Immutable, ordered sequence of Instructions produced by the compiler."""

    def __init__(self, instructions=()):
        self._instructions = tuple(instructions)

    def listing(self):
        """Human-readable listing: list of (opcode name, operand or None) pairs."""
        return [(inst.opcode.name, inst.operand) for inst in self._instructions]

    def __iter__(self):
        return iter(self._instructions)

    def __len__(self):
        return len(self._instructions)

    def __getitem__(self, idx):
        return self._instructions[idx]

    def __eq__(self, other):
        return isinstance(other, Program) and self._instructions == other._instructions

    def __hash__(self):
        return hash(self._instructions)

    def __repr__(self):
        return f"Program([{', '.join(str(inst) for inst in self._instructions)}])"
