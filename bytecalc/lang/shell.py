"""Handles interactive/command-line mode for bytecalc. Uses cmd as backend."""

import cmd

from bytecalc.lang.session import format_result


class Shell(cmd.Cmd):
    """Arithmetic expression compiler shell."""
    intro = ("Simple Compiler - Arithmetic Expression Compiler and Interpreter\n"
             "Enter an arithmetic expression (supports +, -, *, /, and parentheses).\n"
             "Type 'exit' to quit.")
    prompt = "> "
    farewell = "Goodbye!"

    def __init__(self, sess, show_bytecode=True, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.show_bytecode = show_bytecode
        self.line_num = 0

    def default(self, line):
        """Compiles and runs an arbitrary expression."""
        line = self.sess.preprocess_line(line)
        if line is None:
            return False
        if line.lower() == "exit":
            return self.do_exit("")

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            self.sess.add(line, self.line_num)
            self.sess.run()

            if self.sess.results:
                print(format_result(self.sess.pop(), self.show_bytecode))
        return False

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to bytecalc!\n\n"
              "Each line you type is compiled to bytecode for a small stack machine, which then \n"
              "runs it. Integers, +, -, *, / and parentheses are supported; * and / bind tighter \n"
              "than + and -, and division truncates toward zero.\n\n"
              "Try it out by typing '(3+4)*2'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        print(self.farewell)
        return True
