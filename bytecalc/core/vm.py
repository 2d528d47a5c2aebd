"""Stack-based virtual machine for bytecalc programs.

Arithmetic is fixed-width two's complement: operands and results that leave the signed range wrap around, and
division truncates toward zero (-7 / 2 == -3), unlike Python's floor division.
"""

from bytecalc.core.bytecode import OpCode
from bytecalc.lang.error import DivisionByZero, MalformedProgram, StackUnderflow


def wrap(value, bits):
    """Reduces value to a signed integer of the given width."""
    modulus = 1 << bits
    value &= modulus - 1
    return value - modulus if value >= modulus >> 1 else value


def truncdiv(left, right):
    """Integer division truncating toward zero. right must be nonzero."""
    quotient = abs(left) // abs(right)
    return -quotient if (left < 0) != (right < 0) else quotient


class VirtualMachine:
    """Runs one Program. The evaluation stack lives only for the duration of run."""
    BITS = 32

    OPERATIONS = {
        OpCode.ADD: lambda left, right: left + right,
        OpCode.SUB: lambda left, right: left - right,
        OpCode.MUL: lambda left, right: left * right,
        OpCode.DIV: truncdiv,
    }

    def __init__(self, program, bits=BITS, warn=None):
        """warn, if given, is called like ErrorHandler.warn whenever a result wraps around."""
        self.program = program
        self.bits = bits
        self.warn = warn

    def run(self):
        stack = []

        for idx, inst in enumerate(self.program):
            if inst.opcode is OpCode.PUSH:
                value = wrap(inst.operand, self.bits)
                if value != inst.operand and self.warn is not None:
                    self.warn("operand {} of instruction {} overflows {}-bit integer, wrapped to {}",
                              (str(inst.operand), str(idx), str(self.bits), str(value)), diagnosis=False)
                stack.append(value)
                continue

            if len(stack) < 2:
                raise StackUnderflow(idx, inst.opcode)
            right = stack.pop()
            left = stack.pop()

            if inst.opcode is OpCode.DIV and right == 0:
                raise DivisionByZero(idx)

            exact = VirtualMachine.OPERATIONS[inst.opcode](left, right)
            result = wrap(exact, self.bits)
            if result != exact and self.warn is not None:
                msg = "{} {} {} overflows {}-bit integer, wrapped to {}"
                self.warn(msg, (str(left), inst.opcode.value, str(right), str(self.bits), str(result)),
                          diagnosis=False)
            stack.append(result)

        if len(stack) != 1:
            raise MalformedProgram(len(stack))
        return stack.pop()


def execute(program, bits=VirtualMachine.BITS, warn=None):
    """Executes program and returns its integer result. Raises DivisionByZero or a VMError."""
    return VirtualMachine(program, bits, warn).run()
