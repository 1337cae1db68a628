"""
Brace Scanner

Line-fed state machine that finds where a brace-delimited construct ends.

A naive brace counter mis-terminates on any string containing ``{`` or ``}``.
The scanner therefore tracks lexical context:

- single/double-quoted strings (backslash escapes honoured, closed at end of
  line unless the line ends with a continuation backslash)
- template literals (JS) with nested ``${ ... }`` expressions, which may in turn
  contain strings and further template literals
- raw backtick strings (Go), no escapes, may span lines
- ``//`` line comments and ``/* ... */`` block comments

Braces inside ``${ ... }`` belong to the template expression and never affect
the construct depth. Braces inside a parameter list (destructuring, inline object
types) are tracked separately until the body opens.
"""

from dataclasses import dataclass, field
from enum import Enum


class ScanResult(str, Enum):
    """Why a construct ended on the fed line."""

    CLOSED = "closed"  # matching closing brace found
    STATEMENT_END = "statement_end"  # ';' at depth 0 before any '{'


@dataclass(frozen=True, slots=True)
class ScannerProfile:
    """Lexical rules for one language family."""

    template_literals: bool = False  # JS `...${expr}...`
    raw_backtick_strings: bool = False  # Go `...`
    statement_terminator: str | None = None  # JS ';'


JS_PROFILE = ScannerProfile(template_literals=True, statement_terminator=";")
GO_PROFILE = ScannerProfile(raw_backtick_strings=True)

_TEMPLATE = "template"
_RAW = "raw"


@dataclass
class BraceScanner:
    """
    Incremental brace matcher.

    Usage:
        scanner = BraceScanner(JS_PROFILE)
        for index, line in enumerate(lines[start:], start):
            if scanner.feed(line) is not None:
                return index
    """

    profile: ScannerProfile = JS_PROFILE
    depth: int = 0
    paren_depth: int = 0
    found_open: bool = False
    quote: str | None = None
    in_block_comment: bool = False
    # Braces inside a parameter list before the body opens: `({ title }: Props) => {`
    signature_braces: int = 0
    # Context stack: _TEMPLATE / _RAW for string bodies, int for brace depth inside ${ }
    stack: list[str | int] = field(default_factory=list)

    @property
    def in_signature(self) -> bool:
        """True inside `( ... )` / `[ ... ]` before the construct body opened."""
        return not self.stack and not self.found_open and self.paren_depth > 0

    @property
    def in_code(self) -> bool:
        """True when the scanner sits in plain top-level code (no string/comment)."""
        return self.quote is None and not self.in_block_comment and not self.stack

    def feed(self, line: str) -> ScanResult | None:
        """
        Consume one line.

        Returns:
            ScanResult if the construct ended on this line, else None
        """
        length = len(line)
        j = 0

        while j < length:
            char = line[j]
            nxt = line[j + 1] if j + 1 < length else ""

            if self.in_block_comment:
                if char == "*" and nxt == "/":
                    self.in_block_comment = False
                    j += 2
                else:
                    j += 1
                continue

            if self.quote is not None:
                if char == "\\":
                    j += 2
                    continue
                if char == self.quote:
                    self.quote = None
                j += 1
                continue

            top = self.stack[-1] if self.stack else None

            if top == _RAW:
                if char == "`":
                    self.stack.pop()
                j += 1
                continue

            if top == _TEMPLATE:
                if char == "\\":
                    j += 2
                    continue
                if char == "`":
                    self.stack.pop()
                    j += 1
                    continue
                if char == "$" and nxt == "{":
                    self.stack.append(0)
                    j += 2
                    continue
                j += 1
                continue

            # Code context: either construct level or inside a ${ } expression
            if char == "/" and nxt == "/":
                break
            if char == "/" and nxt == "*":
                self.in_block_comment = True
                j += 2
                continue

            if char in ("'", '"'):
                self.quote = char
            elif char == "`":
                if self.profile.template_literals:
                    self.stack.append(_TEMPLATE)
                elif self.profile.raw_backtick_strings:
                    self.stack.append(_RAW)
            elif char == "{":
                if isinstance(top, int):
                    self.stack[-1] = top + 1
                elif self.in_signature:
                    self.signature_braces += 1
                else:
                    self.depth += 1
                    self.found_open = True
            elif char == "}":
                if isinstance(top, int):
                    if top == 0:
                        self.stack.pop()  # back into template text
                    else:
                        self.stack[-1] = top - 1
                elif self.in_signature:
                    self.signature_braces = max(0, self.signature_braces - 1)
                else:
                    self.depth -= 1
                    if self.found_open and self.depth <= 0:
                        return ScanResult.CLOSED
            elif top is None and char in "([":
                self.paren_depth += 1
            elif top is None and char in ")]":
                self.paren_depth = max(0, self.paren_depth - 1)
            elif (
                top is None
                and char == self.profile.statement_terminator
                and not self.found_open
                and self.depth == 0
                and self.paren_depth == 0
            ):
                return ScanResult.STATEMENT_END

            j += 1

        # Plain quotes cannot span lines without a continuation backslash
        if self.quote is not None and not line.endswith("\\"):
            self.quote = None

        return None


def find_brace_end(lines: list[str], start_index: int, profile: ScannerProfile = JS_PROFILE) -> int:
    """
    Find the line index where the construct starting at ``start_index`` ends.

    Returns the last line index if the construct never closes.
    """
    scanner = BraceScanner(profile)
    for index in range(start_index, len(lines)):
        if scanner.feed(lines[index]) is not None:
            return index
    return len(lines) - 1


__all__ = [
    "BraceScanner",
    "ScanResult",
    "ScannerProfile",
    "JS_PROFILE",
    "GO_PROFILE",
    "find_brace_end",
]
