"""Markdown document sink used by the document generators."""

from typing import Protocol


class DocumentSink(Protocol):
    """The emission primitives the document generators rely on."""

    def text_line(self, text: str) -> "DocumentSink": ...

    def new_line(self) -> "DocumentSink": ...

    def paragraph(self, text: str) -> "DocumentSink": ...

    def listing(self, text: str) -> "DocumentSink": ...

    def source(self, text: str, language: str) -> "DocumentSink": ...

    def document_title(self, title: str) -> "DocumentSink": ...

    def section_title_level1(self, title: str) -> "DocumentSink": ...

    def section_title_level2(self, title: str) -> "DocumentSink": ...

    def table_with_header_row(self, rows: list[str]) -> "DocumentSink": ...


class MarkdownBuilder:
    """Accumulates Markdown text. Every method returns the builder for chaining."""

    def __init__(self):
        self._lines: list[str] = []

    def text_line(self, text: str) -> "MarkdownBuilder":
        self._lines.append(text)
        return self

    def new_line(self) -> "MarkdownBuilder":
        self._lines.append("")
        return self

    def paragraph(self, text: str) -> "MarkdownBuilder":
        return self.text_line(text.strip()).new_line()

    def listing(self, text: str) -> "MarkdownBuilder":
        return self.source(text, "")

    def source(self, text: str, language: str) -> "MarkdownBuilder":
        self._lines.append(f"```{language}")
        self._lines.append(text.rstrip("\n"))
        self._lines.append("```")
        return self.new_line()

    def document_title(self, title: str) -> "MarkdownBuilder":
        return self._heading(1, title)

    def section_title_level1(self, title: str) -> "MarkdownBuilder":
        return self._heading(2, title)

    def section_title_level2(self, title: str) -> "MarkdownBuilder":
        return self._heading(3, title)

    def table_with_header_row(self, rows: list[str]) -> "MarkdownBuilder":
        """Write a table from '|'-delimited rows; the first row is the header."""
        if not rows:
            return self
        columns = rows[0].count("|") + 1
        self._lines.append(rows[0])
        self._lines.append("|".join(["---"] * columns))
        self._lines.extend(rows[1:])
        return self.new_line()

    def _heading(self, level: int, title: str) -> "MarkdownBuilder":
        self._lines.append(f"{'#' * level} {title}")
        return self.new_line()

    def mark(self) -> int:
        """Return a position that ``rollback`` can truncate back to."""
        return len(self._lines)

    def rollback(self, position: int) -> None:
        del self._lines[position:]

    def to_markdown(self) -> str:
        return "\n".join(self._lines) + "\n"

    def __str__(self) -> str:
        return self.to_markdown()
