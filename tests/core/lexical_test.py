import unittest

from bytecalc.core.lexical import Lexer, Token, TokenKind
from bytecalc.lang.error import LexError


def kinds(text):
    return [token.kind for token in Lexer(text)]


class LexerTestCase(unittest.TestCase):

    def test_punctuation(self):
        cases = {
            "+": TokenKind.PLUS,
            "-": TokenKind.MINUS,
            "*": TokenKind.STAR,
            "/": TokenKind.SLASH,
            "(": TokenKind.LPAREN,
            ")": TokenKind.RPAREN,
        }
        for case, kind in cases.items():
            self.assertEqual([kind, TokenKind.EOF], kinds(case), case)

    def test_numbers(self):
        cases = {
            "0": ["0"],
            "42": ["42"],
            "007": ["007"],
            "12 34": ["12", "34"],
            "1+23": ["1", "23"],
        }
        for case, literals in cases.items():
            numbers = [token.text for token in Lexer(case) if token.kind is TokenKind.NUMBER]
            self.assertEqual(literals, numbers, case)

    def test_positions(self):
        tokens = list(Lexer(" 12 *(3)"))
        self.assertEqual([
            Token(TokenKind.NUMBER, "12", 1),
            Token(TokenKind.STAR, "*", 4),
            Token(TokenKind.LPAREN, "(", 5),
            Token(TokenKind.NUMBER, "3", 6),
            Token(TokenKind.RPAREN, ")", 7),
            Token(TokenKind.EOF, "", 8),
        ], tokens)

    def test_whitespace(self):
        should_pass = ["1 + 2", "\t1+\n2 ", "   1    +2"]
        for case in should_pass:
            self.assertEqual([TokenKind.NUMBER, TokenKind.PLUS, TokenKind.NUMBER, TokenKind.EOF], kinds(case), case)

    def test_eof_repeats(self):
        lexer = Lexer("7")
        self.assertEqual(TokenKind.NUMBER, lexer.next_token().kind)
        for __ in range(3):
            self.assertEqual(Token(TokenKind.EOF, "", 1), lexer.next_token())

        self.assertEqual([TokenKind.EOF], kinds(""))
        self.assertEqual([TokenKind.EOF], kinds("   "))

    def test_unknown_character(self):
        cases = {"x": ("x", 0), "1 + a": ("a", 4), "2.5": (".", 1), "3 % 2": ("%", 2), "²": ("²", 0)}
        for case, (character, position) in cases.items():
            with self.assertRaises(LexError) as ctx:
                list(Lexer(case))
            self.assertEqual(character, ctx.exception.character, case)
            self.assertEqual(position, ctx.exception.position, case)
            self.assertEqual("lex", ctx.exception.stage)

    def test_lazy(self):
        # tokens before the bad character are produced normally
        lexer = Lexer("1 $")
        self.assertEqual(Token(TokenKind.NUMBER, "1", 0), lexer.next_token())
        self.assertRaises(LexError, lexer.next_token)


if __name__ == '__main__':
    unittest.main()
