"""Session control for bytecalc. Runs the compile/execute pipeline once per line, either in command-line mode or file
interpretation mode, and keeps the results for the caller to render.
"""

from dataclasses import dataclass

from bytecalc.core.bytecode import Program
from bytecalc.core.grammar import Parser, compile
from bytecalc.core.vm import VirtualMachine, execute
from bytecalc.lang.error import GenericException


@dataclass(frozen=True)
class Result:
    expr: str
    program: Program
    value: int


def format_listing(program):
    """Bytecode listing, one indented instruction per line."""
    return "Bytecode:\n" + "\n".join(f"  {inst}" for inst in program)


def format_result(result, show_bytecode=True):
    text = f"Result: {result.value}"
    if show_bytecode:
        text = format_listing(result.program) + "\n" + text
    return text


class Session:
    """Governs a bytecalc session. Nothing carries over from one expression to the next except the list of results."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, bits=VirtualMachine.BITS, max_depth=Parser.MAX_DEPTH,
                 on_result=None):
        """on_result, if given, is called with each Result as soon as its line has run."""
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.bits = bits
        self.max_depth = max_depth
        self.on_result = on_result

        self.to_exec = {}  # dict of line num: expr to compile and execute
        self.results = []

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    lines = file.read().splitlines()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

            for line_num, line in enumerate(lines):
                if line and not line.isspace():
                    self.add(line, line_num + 1)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Removes surrounding whitespace. Returns None if nothing is left."""
        line = line.strip()
        return line if line else None

    def add(self, expr, line_num=0):
        """Queues expr. Compilation and execution are delayed until run is called."""
        self.to_exec[line_num] = expr

    def run(self):
        """Compiles and executes queued lines in line order, reporting each result as it is produced. A line that fails
        is reported and dropped; whether that ends the session is up to the error handler.
        """
        for line_num, expr in sorted(self.to_exec.items()):
            del self.to_exec[line_num]

            with self.error_handler:
                self.error_handler.register_line(self.path, expr, line_num)  # in case error is raised

                program = compile(expr, self.bits, self.max_depth)
                result = Result(expr, program, execute(program, self.bits, warn=self.error_handler.warn))
                self.results.append(result)
                if self.on_result is not None:
                    self.on_result(result)

                self.error_handler.remove_line(self.path)  # error was not raised

    def pop(self):
        """Removes and returns the most recent result."""
        return self.results.pop()

