"""Runs bytecalc on a file of expressions (one per line) or in command-line mode. Also uses error handling context
manager. Called from the bytecalc console script.
"""

import argparse

from bytecalc.core.grammar import Parser
from bytecalc.core.vm import VirtualMachine
from bytecalc.lang.error import ErrorHandler
from bytecalc.lang.session import Session, format_result
from bytecalc.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="bytecalc", description="Compile arithmetic expressions to stack bytecode "
                                                                  "and run them.")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--bits", type=int, choices=[8, 16, 32, 64], default=VirtualMachine.BITS,
                        help="signed integer width for literals and arithmetic (default: %(default)s)")
    parser.add_argument("--max-depth", type=int, default=Parser.MAX_DEPTH,
                        help="maximum parenthesis nesting (default: %(default)s)")
    parser.add_argument("--no-bytecode", dest="show_bytecode", action="store_false",
                        help="print only results, not the bytecode listing")
    parser.add_argument("--keep-going", action="store_true",
                        help="in file mode, report errors and continue with the next line")
    return parser


def main(argv=None):
    """Runs bytecalc. Called from bytecalc console script."""
    with ErrorHandler() as error_handler:
        parser = build_parser()
        args = parser.parse_args(argv)
        if args.max_depth < 1:
            parser.error("--max-depth must be at least 1")

        if args.file is not None:
            error_handler.fatal = not args.keep_going
            sess = Session(error_handler, args.file, cmd_line=False, bits=args.bits, max_depth=args.max_depth,
                           on_result=lambda result: print(format_result(result, args.show_bytecode)))
            sess.run()

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, bits=args.bits, max_depth=args.max_depth)
            Shell(sess, show_bytecode=args.show_bytecode).cmdloop()


if __name__ == "__main__":
    main()
