"""
SIMPLE Programming Language Parser
pyparsing grammar that turns SIMPLE source text into one root term
"""

from typing import Dict
import re

from pyparsing import (
    Forward, Group, Keyword, Literal, MatchFirst, OpAssoc, Optional as PyParsingOptional,
    ParseBaseException, ParserElement, Regex, StringEnd, Suppress, ZeroOrMore,
    infix_notation, one_of
)

from error_handling import SimpleParseError
from syntax import (
    format_node,
    make_add,
    make_assign,
    make_boolean,
    make_call,
    make_do_nothing,
    make_eq,
    make_fst,
    make_fun,
    make_gt,
    make_if,
    make_is_do_nothing,
    make_lt,
    make_multiply,
    make_number,
    make_pair,
    make_sequence_of,
    make_snd,
    make_subtract,
    make_variable,
    make_while,
)

# Enable packrat parsing for performance
ParserElement.enable_packrat()


BINARY_CONSTRUCTORS = {
    '+': make_add,
    '-': make_subtract,
    '*': make_multiply,
    '<': make_lt,
    '>': make_gt,
    '==': make_eq,
}

KEYWORDS = [
    'if', 'else', 'while', 'function', 'true', 'false',
    'pair', 'fst', 'snd', 'do-nothing', 'is-do-nothing',
]

COMMENT_PATTERN = re.compile(r'(#|//).*$', re.MULTILINE)


def fold_binary(tokens):
    """Fold [a, op, b, op, c] left-associatively into nested binary terms"""
    items = tokens[0]
    node = items[0]
    for i in range(1, len(items), 2):
        node = BINARY_CONSTRUCTORS[items[i]](node, items[i + 1])
    return node


def fold_calls(tokens):
    """Apply each trailing argument list in turn; f(a)(b) is (f(a))(b)"""
    node = tokens[0]
    for args in tokens[1:]:
        arg = args[0] if len(args) else make_do_nothing()
        node = make_call(node, arg)
    return node


class SimpleGrammar:
    """SIMPLE grammar definition using pyparsing"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the SIMPLE grammar: statements, blocks and infix expressions"""

        # Forward declarations for recursive structures
        expression = Forward()
        statement = Forward()
        sequence = Forward()

        # Keywords
        keywords = {word: Keyword(word) for word in KEYWORDS}
        reserved = MatchFirst(keywords.values())

        lparen = Suppress("(")
        rparen = Suppress(")")

        # Identifiers exclude keywords; binding_identifier yields the raw name
        binding_identifier = ~reserved + Regex(r'[A-Za-z_][A-Za-z0-9_]*')
        variable = binding_identifier.copy().set_parse_action(lambda t: make_variable(t[0]))

        # Literals
        number = Regex(r'-?\d+').set_parse_action(lambda t: make_number(int(t[0])))
        boolean = (keywords['true'] | keywords['false']).set_parse_action(
            lambda t: make_boolean(t[0] == 'true')
        )
        do_nothing = keywords['do-nothing'].copy().set_parse_action(lambda t: make_do_nothing())

        # Keyword forms
        is_do_nothing = (
            Suppress(keywords['is-do-nothing']) + lparen + expression + rparen
        ).set_parse_action(lambda t: make_is_do_nothing(t[0]))

        pair = (
            Suppress(keywords['pair']) + lparen + expression + Suppress(",") + expression + rparen
        ).set_parse_action(lambda t: make_pair(t[0], t[1]))

        fst = (Suppress(keywords['fst']) + lparen + expression + rparen).set_parse_action(lambda t: make_fst(t[0]))
        snd = (Suppress(keywords['snd']) + lparen + expression + rparen).set_parse_action(lambda t: make_snd(t[0]))

        # Blocks and bodies of if / while / function
        block = (
            Suppress("{") + PyParsingOptional(sequence) + Suppress("}")
        ).set_parse_action(lambda t: t[0] if len(t) else make_do_nothing())
        body = block | statement

        # function name (param) body - both name and param may be omitted
        function_literal = (
            Suppress(keywords['function']) +
            PyParsingOptional(binding_identifier, default="") +
            lparen + PyParsingOptional(binding_identifier, default="") + rparen +
            body
        ).set_parse_action(lambda t: make_fun(t[0], t[1], t[2]))

        parenthesized = lparen + expression + rparen

        primary = (
            boolean | do_nothing | is_do_nothing | pair | fst | snd |
            function_literal | number | variable | parenthesized
        )

        # Calls: callee followed by zero or more (arg) lists, an empty list passes do-nothing
        call_args = Group(lparen + PyParsingOptional(expression) + rparen)
        postfix = (primary + ZeroOrMore(call_args)).set_parse_action(fold_calls)

        # Infix operators, tightest first
        expression <<= infix_notation(postfix, [
            (Literal("*"), 2, OpAssoc.LEFT, fold_binary),
            (one_of("+ -"), 2, OpAssoc.LEFT, fold_binary),
            (one_of("< > =="), 2, OpAssoc.LEFT, fold_binary),
        ])

        # Statements
        assignment = (
            binding_identifier + Suppress(":=") + expression
        ).set_parse_action(lambda t: make_assign(t[0], t[1]))

        if_statement = (
            Suppress(keywords['if']) + lparen + expression + rparen +
            body + Suppress(keywords['else']) + body
        ).set_parse_action(lambda t: make_if(t[0], t[1], t[2]))

        while_statement = (
            Suppress(keywords['while']) + lparen + expression + rparen + body
        ).set_parse_action(lambda t: make_while(t[0], t[1]))

        statement <<= if_statement | while_statement | assignment | block | expression

        # Statements separated by ';', right-nested into Sequence terms
        sequence <<= (
            statement + ZeroOrMore(Suppress(";") + statement) + PyParsingOptional(Suppress(";"))
        ).set_parse_action(lambda t: make_sequence_of(list(t)))

        program = PyParsingOptional(sequence) + StringEnd()

        # Store the main parsers
        self.program = program
        self.sequence = sequence
        self.statement = statement
        self.expression = expression
        self.primary = primary
        self.binding_identifier = binding_identifier

    def _preprocess_text(self, text: str) -> str:
        """Strip comments (# or //) while keeping line numbers intact for error reports"""
        return COMMENT_PATTERN.sub('', text)

    def parse_program(self, text: str, filename: str = "<input>") -> Dict:
        """Parse a complete SIMPLE program into a single root term"""
        preprocessed_text = self._preprocess_text(text)
        try:
            result = self.program.parse_string(preprocessed_text, parse_all=True)
        except ParseBaseException as e:
            raise SimpleParseError.from_exception(e, text, filename) from None

        # Programs with no statements (e.g. only comments) do nothing
        node = result[0] if len(result) else make_do_nothing()
        if self.debug:
            print(f"Parsed {filename}: {format_node(node)}")
        return node

    def parse_expression(self, text: str, filename: str = "<input>") -> Dict:
        """Parse a single SIMPLE expression"""
        try:
            result = self.expression.parse_string(self._preprocess_text(text), parse_all=True)
        except ParseBaseException as e:
            raise SimpleParseError.from_exception(e, text, filename) from None
        return result[0]


class SimpleParser:
    """Main SIMPLE parser: reads files or strings and hands back one root term"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = SimpleGrammar(debug)

    def parse_file(self, filepath: str) -> Dict:
        """Parse a SIMPLE source file"""
        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise SimpleParseError(f"File not found: {filepath}", filename=filepath)
        except UnicodeDecodeError as e:
            raise SimpleParseError(f"Cannot decode file {filepath}: {e}", filename=filepath)
        except OSError as e:
            raise SimpleParseError(f"Cannot read file {filepath}: {e.strerror}", filename=filepath)
        return self.grammar.parse_program(content, filepath)

    def parse_string(self, text: str, filename: str = "<input>") -> Dict:
        """Parse SIMPLE source code from string"""
        return self.grammar.parse_program(text, filename)

    def parse_expression(self, text: str, filename: str = "<input>") -> Dict:
        """Parse a single SIMPLE expression"""
        return self.grammar.parse_expression(text, filename)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> SimpleParser:
    """Create a SIMPLE parser"""
    return SimpleParser(debug=debug)


def create_debug_parser() -> SimpleParser:
    """Create a SIMPLE parser with debug enabled"""
    return SimpleParser(debug=True)


def parse(text: str) -> Dict:
    """Parse a program with a default parser"""
    return create_parser().parse_string(text)
