"""Lexical analysis for bytecalc expressions. The lexer is single-pass with one character of lookahead and never
backtracks: tokens are produced on demand, one per call to next_token.

```
<number> ::= <digit>+          ; maximal run of ASCII digits, converted to an integer by the parser
<op>     ::= "+" | "-" | "*" | "/"
<paren>  ::= "(" | ")"
```

Whitespace between tokens is skipped. Anything else is a LexError.
"""

from dataclasses import dataclass
from enum import Enum

from bytecalc.lang.error import LexError


class TokenKind(Enum):
    NUMBER = "number"
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    LPAREN = "("
    RPAREN = ")"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    """Classified slice of the input. text is the literal for NUMBER tokens, the character for punctuation and "" for
    EOF. position is the column the token starts at.
    """
    kind: TokenKind
    text: str
    position: int

    def __str__(self):
        if self.kind is TokenKind.NUMBER:
            return f"{self.kind.name}({self.text})"
        return self.kind.name


class Lexer:
    """Tokenizes a single line. Not restartable: build a new Lexer for new input."""
    DIGITS = "0123456789"
    PUNCTUATION = {
        "+": TokenKind.PLUS,
        "-": TokenKind.MINUS,
        "*": TokenKind.STAR,
        "/": TokenKind.SLASH,
        "(": TokenKind.LPAREN,
        ")": TokenKind.RPAREN,
    }

    def __init__(self, text):
        self.text = text
        self.pos = 0

    @property
    def current_char(self):
        """Character under the cursor, or None at end of input."""
        return self.text[self.pos] if self.pos < len(self.text) else None

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char.isspace():
            self.pos += 1

    def number(self):
        start = self.pos
        while self.current_char is not None and self.current_char in Lexer.DIGITS:
            self.pos += 1
        return Token(TokenKind.NUMBER, self.text[start:self.pos], start)

    def next_token(self):
        """Returns the next Token. Once the input is exhausted, every call returns an EOF token."""
        self.skip_whitespace()

        char = self.current_char
        if char is None:
            return Token(TokenKind.EOF, "", len(self.text))

        if char in Lexer.DIGITS:
            return self.number()

        kind = Lexer.PUNCTUATION.get(char)
        if kind is None:
            raise LexError(self.text, char, self.pos)

        self.pos += 1
        return Token(kind, char, self.pos - 1)

    def __iter__(self):
        """Yields tokens up to and including the first EOF."""
        while True:
            token = self.next_token()
            yield token
            if token.kind is TokenKind.EOF:
                return
