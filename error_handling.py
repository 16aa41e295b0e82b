"""
Error handling for SIMPLE: runtime error kinds raised by both engines, and
enhanced parse errors with source context and suggestions.
Pure functional style - classes only for the exception types
"""

from typing import Dict, List, Optional
from pyparsing import ParseBaseException
import re

from syntax import format_node


# ============================================================================
# RUNTIME ERRORS
# ============================================================================

class SimpleRuntimeError(Exception):
    """Base class for fatal evaluation errors"""
    def __init__(self, message: str, term: Optional[Dict] = None):
        self.message = message
        self.term = term
        super().__init__(message)


class UnboundVariable(SimpleRuntimeError):
    """A variable or call-frame lookup found no binding"""
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Variable {name} not found")


class TypeMismatch(SimpleRuntimeError):
    """A term did not have the shape an operation requires"""
    def __init__(self, expected: str, term: Dict):
        self.expected = expected
        super().__init__(f"Expected {expected}, got: {format_node(term)}", term)


class CallOnNonClosure(TypeMismatch):
    def __init__(self, term: Dict):
        self.expected = "closure"
        SimpleRuntimeError.__init__(self, f"Call on non-closure type: {format_node(term)}", term)


class UnhandledTerm(SimpleRuntimeError):
    """A term variant that is not meaningful for the operation attempted"""
    def __init__(self, term: Dict, operation: str = "evaluate"):
        self.operation = operation
        super().__init__(f"Cannot {operation} term: {format_node(term)}", term)


# ============================================================================
# PARSE ERROR DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract expected tokens from exception"""
    expected = []

    # pyparsing reports "Expected <thing>, found ..." in its message
    msg = str(exc)
    if "Expected" in msg:
        expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", msg)
        if expected_match:
            expected.append(expected_match.group(1))

    return expected if expected else ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of line"
    return "end of input"


def generate_suggestions(source_text: str, got: str, expected: List[str]) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    if re.search(r"(?<![:=<>])=(?!=)", got):
        suggestions.append("Assignment uses ':=' and equality uses '=='")

    if source_text.count("{") != source_text.count("}"):
        suggestions.append("Braces are unbalanced - every '{' needs a matching '}'")

    if source_text.count("(") != source_text.count(")"):
        suggestions.append("Parentheses are unbalanced - every '(' needs a matching ')'")

    if re.search(r"\bif\b", source_text) and not re.search(r"\belse\b", source_text):
        suggestions.append("Every 'if' needs an 'else' branch (use 'else do-nothing')")

    if "else" in str(expected):
        suggestions.append("Separate statements inside a branch with ';' and wrap them in { }")

    return suggestions


def enhance_parse_exception_dict(exc: ParseBaseException, source_text: str) -> Dict:
    """Convert pyparsing exception to an enhanced SIMPLE error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got, expected)

    return make_parse_error(
        message=str(exc),
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


# ============================================================================
# PARSE ERROR EXCEPTION
# ============================================================================

class SimpleParseError(Exception):
    """Parse error carrying the enhanced report fields"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    @classmethod
    def from_exception(cls, exc: ParseBaseException, source_text: str, filename: str = "<input>") -> 'SimpleParseError':
        error_dict = enhance_parse_exception_dict(exc, source_text)
        return cls(filename=filename, **error_dict)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return f"{self.filename}: " + format_parse_error(error_dict)
