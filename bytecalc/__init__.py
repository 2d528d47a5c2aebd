"""Arithmetic expression compiler and stack virtual machine.

Program flow:
    1. Lexer (core/lexical.py): splits a line into tokens on demand
    2. Parser (core/grammar.py): recursive descent over the tokens, emitting postfix bytecode as it goes
    3. Virtual machine (core/vm.py): runs the bytecode on an evaluation stack and returns one integer

Each stage fails fast with a GenericException subclass (see lang/error.py) naming the stage and the offending position.
"""

from bytecalc.core.bytecode import Instruction, OpCode, Program
from bytecalc.core.grammar import Parser, compile
from bytecalc.core.lexical import Lexer, Token, TokenKind
from bytecalc.core.vm import VirtualMachine, execute
from bytecalc.lang.error import (DivisionByZero, GenericException, LexError, MalformedProgram, MathError,
                                 MissingCloseParen, NestingTooDeep, NumberOutOfRange, ParseError, StackUnderflow,
                                 TrailingInput, UnexpectedToken, VMError)


def evaluate(text, bits=VirtualMachine.BITS, max_depth=Parser.MAX_DEPTH):
    """Compiles and executes text. Returns (Program, value); raises the first error of any stage."""
    program = compile(text, bits, max_depth)
    return program, execute(program, bits)
