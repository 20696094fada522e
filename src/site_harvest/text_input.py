"""
Line-oriented access to parameter text.

``LineReader`` supplies the meaningful lines of a block one at a time
(blank lines and ">>" comments are skipped, source line numbers kept).
``LineCursor`` walks through the characters of a single line.
"""

from collections.abc import Iterable

from .config import COMMENT_MARKER
from .errors import UnexpectedTrailingDataError


class LineCursor:
    """Cursor over the characters of one line."""

    def __init__(self, text: str, index: int = 0):
        self.text = text
        self.index = index

    @property
    def at_end(self) -> bool:
        return self.index >= len(self.text)

    @property
    def rest(self) -> str:
        return self.text[self.index :]

    def peek(self) -> str:
        """Next character, or "" at end of line."""
        if self.at_end:
            return ""
        return self.text[self.index]

    def skip_whitespace(self) -> None:
        while not self.at_end and self.text[self.index].isspace():
            self.index += 1

    def read_word(self, stop: str = "") -> str:
        """
        Skip leading whitespace and read characters up to the next
        whitespace (or any character in ``stop``).

        Returns:
            The word, or "" if nothing is left on the line
        """
        self.skip_whitespace()
        start = self.index
        while not self.at_end:
            char = self.text[self.index]
            if char.isspace() or char in stop:
                break
            self.index += 1
        return self.text[start : self.index]


def _strip_comment(line: str) -> str:
    marker = line.find(COMMENT_MARKER)
    if marker >= 0:
        line = line[:marker]
    return line.rstrip()


class LineReader:
    """
    Supplies the non-blank, non-comment lines of a block of text.

    Args:
        source: The text itself, or an iterable of lines
        first_line_number: Source line number of the first line
    """

    def __init__(self, source: str | Iterable[str], first_line_number: int = 1):
        lines = source.splitlines() if isinstance(source, str) else list(source)
        self._lines: list[tuple[int, str]] = []
        for number, raw in enumerate(lines, start=first_line_number):
            line = _strip_comment(raw)
            if line.strip():
                self._lines.append((number, line))
        self._position = 0

    @property
    def at_end(self) -> bool:
        return self._position >= len(self._lines)

    @property
    def current_line(self) -> str:
        if self.at_end:
            return ""
        return self._lines[self._position][1]

    @property
    def line_number(self) -> int | None:
        """Source line number of the current line (None at end of input)."""
        if self.at_end:
            return None
        return self._lines[self._position][0]

    @property
    def current_name(self) -> str:
        """Leading word of the current line ("" at end of input)."""
        return LineCursor(self.current_line).read_word()

    def advance(self) -> None:
        if not self.at_end:
            self._position += 1

    def read_optional_name(self, name: str) -> bool:
        """
        Consume the current line if it starts with the keyword ``name``.

        Returns:
            True if the line was consumed, False otherwise

        Raises:
            UnexpectedTrailingDataError: If anything follows the keyword
        """
        if self.at_end or self.current_name != name:
            return False

        cursor = LineCursor(self.current_line)
        cursor.read_word()
        extra = cursor.read_word()
        if extra:
            raise UnexpectedTrailingDataError(
                f'Extra data "{extra}" after the name "{name}"',
                text=extra,
                line_number=self.line_number,
            )
        self.advance()
        return True
