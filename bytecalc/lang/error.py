"""Error handling for bytecalc. Every failure of the pipeline is a GenericException subclass tagged with the stage that
raised it. If another type of error makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Taxonomy:

```
GenericException
 +-- LexError                 ; stage "lex": character that no token starts with
 +-- ParseError               ; stage "parse"
 |    +-- UnexpectedToken     ; factor saw something other than NUMBER or "("
 |    +-- MissingCloseParen   ; "(" expr not followed by ")"
 |    +-- TrailingInput       ; input left over after a complete expr
 |    +-- NumberOutOfRange    ; literal does not fit the integer width
 |    +-- NestingTooDeep      ; too many nested "("
 +-- MathError                ; stage "runtime"
 |    +-- DivisionByZero
 +-- VMError                  ; stage "vm": internal consistency checks, reported as internal errors
      +-- MalformedProgram    ; final stack depth != 1
      +-- StackUnderflow      ; operator with fewer than two operands
```
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error/warning message so that it can be used to throw a bytecalc error/warning. Each "{}" in msg is
    filled with the matching entry of exprs, bolded.
    """
    stage = None  # pipeline stage that raised the error, if any

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]  # exprs[0] should be the offending expr that caused the error
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal

        super().__init__(self.plain_msg)

    @property
    def kind(self):
        return type(self).__name__


class LexError(GenericException):
    """Character that cannot start any token."""
    stage = "lex"

    def __init__(self, text, character, position):
        self.character = character
        self.position = position
        super().__init__("'{}' contains unknown character '{}'", (text, character), start=position,
                         end=position + 1)


class ParseError(GenericException):
    """Superclass for malformed token sequences. position is the column of the offending token."""
    stage = "parse"

    def __init__(self, msg, text, position, exprs=(), width=1):
        self.position = position
        super().__init__(msg, (text, *exprs), start=position, end=position + max(width, 1))


def _describe(token):
    return "end of input" if token.text == "" else token.text


class UnexpectedToken(ParseError):

    def __init__(self, text, found):
        self.found = found
        super().__init__("'{}' expected a number or '(' but found {}", text, found.position, (_describe(found),),
                         width=len(found.text))


class MissingCloseParen(ParseError):

    def __init__(self, text, found):
        self.found = found
        super().__init__("'{}' is missing ')', found {}", text, found.position, (_describe(found),),
                         width=len(found.text))


class TrailingInput(ParseError):

    def __init__(self, text, found):
        self.found = found
        super().__init__("'{}' has trailing input starting at '{}'", text, found.position, (found.text,),
                         width=len(text) - found.position)


class NumberOutOfRange(ParseError):

    def __init__(self, text, literal, position, bits):
        self.literal = literal
        self.bits = bits
        super().__init__("'{}' has literal '{}' that does not fit in a {}-bit integer", text, position,
                         (literal, str(bits)), width=len(literal))


class NestingTooDeep(ParseError):

    def __init__(self, text, position, limit):
        self.limit = limit
        super().__init__("'{}' nests parentheses deeper than {}", text, position, (str(limit),))


class MathError(GenericException):
    """Arithmetic failure while executing a program. index is the offending instruction."""
    stage = "runtime"

    def __init__(self, msg, index, exprs=None):
        self.index = index
        super().__init__(msg, exprs, diagnosis=False)


class DivisionByZero(MathError):

    def __init__(self, index):
        super().__init__("division by zero", index)


class VMError(GenericException):
    """A program the virtual machine cannot run consistently. Never raised for programs built by the compiler."""
    stage = "vm"

    def __init__(self, msg, exprs=None):
        super().__init__(msg, exprs, diagnosis=False, internal=True)


class MalformedProgram(VMError):

    def __init__(self, final_depth):
        self.final_depth = final_depth
        super().__init__("malformed program: {} values left on the stack, expected 1", str(final_depth))


class StackUnderflow(VMError):

    def __init__(self, index, opcode):
        self.index = index
        self.opcode = opcode
        super().__init__("stack underflow at instruction {} ({})", (str(index), opcode.name))


class ErrorHandler:
    """Context manager that reports bytecalc errors/warnings on the console. Fatal handlers exit after the first error."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def warn(self, *args, **kwargs):
        """Generates and prints runtime warning message based on args."""
        error = GenericException(*args, **kwargs)

        location = ""
        for file, (line, line_num) in self.traceback.items():
            if line:
                col = line.find(error.expr) + error.start if error.expr in line else 0
                location = f"{file}:{line_num}:{col}: "
                break

        error_msg = colored(location, attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg

        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        label = f"{error.stage} error: " if error.stage else "error: "
        error_msg += colored(label, ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        self.traceback = {}  # if error occurred, reset traceback (no need if error is fatal)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Reports the error and suppresses it, unless the handler is fatal (exit status 1) or the interpreter is
        already exiting. Errors outside the GenericException taxonomy are bugs in bytecalc and are reported as
        internal errors under the same policy, so a bad line never ends an interactive session.
        """
        if exc_type is None:
            return False
        if issubclass(exc_type, SystemExit):
            return False

        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded, try a smaller --max-depth"))
        elif issubclass(exc_type, GenericException):
            self.throw(exc_val)
        else:
            self.throw(GenericException("unknown error: {}", f"{exc_type.__name__}: {exc_val}", diagnosis=False,
                                        internal=True))
        return True
