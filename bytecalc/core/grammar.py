"""Recursive-descent parser that compiles bytecalc expressions straight to bytecode, without building a syntax tree.

```
<expr>   ::= <term> (("+" | "-") <term>)*      ; left-associative
<term>   ::= <factor> (("*" | "/") <factor>)*  ; left-associative, binds tighter than <expr> operators
<factor> ::= <number> | "(" <expr> ")"
```

Precedence comes from the nesting of the rules alone. Each rule emits the instructions for its operands before the
instruction for its operator, so the program is in postfix order and runs on a plain stack machine. There is no
unary minus: "-5" fails in <factor>.
"""

from bytecalc.core.bytecode import Instruction, OpCode, Program
from bytecalc.core.lexical import Lexer, TokenKind
from bytecalc.lang.error import MissingCloseParen, NestingTooDeep, NumberOutOfRange, TrailingInput, UnexpectedToken


class Parser:
    """Single-use compiler for one line of input. Pulls tokens from its own Lexer one at a time."""
    BITS = 32
    MAX_DEPTH = 200  # each level of nesting costs three Python frames

    EXPR_OPS = {TokenKind.PLUS: OpCode.ADD, TokenKind.MINUS: OpCode.SUB}
    TERM_OPS = {TokenKind.STAR: OpCode.MUL, TokenKind.SLASH: OpCode.DIV}

    def __init__(self, text, bits=BITS, max_depth=MAX_DEPTH):
        self.text = text
        self.lexer = Lexer(text)
        self.max_value = (1 << (bits - 1)) - 1
        self.max_digits = len(str(self.max_value))  # longer literals are rejected before conversion
        self.bits = bits
        self.max_depth = max_depth

        self.depth = 0
        self.instructions = []
        self.current_token = self.lexer.next_token()

    def advance(self):
        self.current_token = self.lexer.next_token()

    def emit(self, opcode, operand=None):
        self.instructions.append(Instruction(opcode, operand))

    def parse(self):
        """Compiles the whole input and returns the Program. Raises on the first error."""
        self.expr()
        if self.current_token.kind is not TokenKind.EOF:
            raise TrailingInput(self.text, self.current_token)
        return Program(self.instructions)

    def expr(self):
        self.term()
        while self.current_token.kind in Parser.EXPR_OPS:
            opcode = Parser.EXPR_OPS[self.current_token.kind]
            self.advance()
            self.term()
            self.emit(opcode)

    def term(self):
        self.factor()
        while self.current_token.kind in Parser.TERM_OPS:
            opcode = Parser.TERM_OPS[self.current_token.kind]
            self.advance()
            self.factor()
            self.emit(opcode)

    def factor(self):
        token = self.current_token

        if token.kind is TokenKind.NUMBER:
            digits = token.text.lstrip("0") or "0"
            value = int(digits) if len(digits) <= self.max_digits else None
            if value is None or value > self.max_value:
                raise NumberOutOfRange(self.text, token.text, token.position, self.bits)
            self.advance()
            self.emit(OpCode.PUSH, value)

        elif token.kind is TokenKind.LPAREN:
            self.depth += 1
            if self.depth > self.max_depth:
                raise NestingTooDeep(self.text, token.position, self.max_depth)

            self.advance()
            self.expr()
            if self.current_token.kind is not TokenKind.RPAREN:
                raise MissingCloseParen(self.text, self.current_token)
            self.advance()
            self.depth -= 1

        else:
            raise UnexpectedToken(self.text, token)


def compile(text, bits=Parser.BITS, max_depth=Parser.MAX_DEPTH):
    """Compiles one expression to a Program. Raises LexError or a ParseError subclass on malformed input."""
    return Parser(text, bits, max_depth).parse()
