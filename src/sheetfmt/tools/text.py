"""text transforms for values copied out of a spreadsheet (newline rows, tab columns)."""
import re
from typing import List

from ..domain.errors import InvalidPatternError

ROW_SEPARATOR = "\n"
COLUMN_SEPARATOR = "\t"


def _repeat(items: List[str], times: int, gap: bool) -> List[str]:
    if times < 0:
        raise ValueError(f"repeat count must not be negative, got {times}")

    if not gap:
        return [item for item in items for _ in range(times)]

    result = []
    for i, item in enumerate(items):
        result.append(item)
        if i != len(items) - 1:
            result.extend([""] * times)
    return result


def repeat_lines(text: str, times: int, gap: bool = False) -> str:
    """
    repeat every line `times` times.

    with gap, lines are kept once and `times` blank lines are inserted between them.
    """
    return ROW_SEPARATOR.join(_repeat(text.split(ROW_SEPARATOR), times, gap))


def repeat_columns(text: str, times: int, gap: bool = False) -> str:
    """same as repeat_lines, for tab separated cells."""
    return COLUMN_SEPARATOR.join(_repeat(text.split(COLUMN_SEPARATOR), times, gap))


def remove_duplicates(text: str, columns: bool = False) -> str:
    """drop repeated and empty lines (or tab cells), keeping first occurrences in order."""
    separator = COLUMN_SEPARATOR if columns else ROW_SEPARATOR
    unique = dict.fromkeys(item for item in text.split(separator) if item)
    return separator.join(unique)


def _strip_wildcard(value: str) -> str:
    if value.startswith("*"):
        value = value[1:]
    if value.endswith("*"):
        value = value[:-1]
    return value


def set_wildcard(text: str, remove: bool = False) -> str:
    """wrap every non-blank cell in * wildcards, or strip them when remove is set."""
    rows = []
    for line in text.split(ROW_SEPARATOR):
        cells = []
        for cell in line.split(COLUMN_SEPARATOR):
            value = cell.strip()
            if not value:
                cells.append(cell)
                continue
            value = _strip_wildcard(value)
            cells.append(value if remove else f"*{value}*")
        rows.append(COLUMN_SEPARATOR.join(cells))
    return ROW_SEPARATOR.join(rows)


def split_array_formula(text: str) -> str:
    """turn a ={...; ...} array formula spread over lines into one formula per line."""
    text = text.strip()
    if text.startswith("={"):
        text = text[2:]
    if text.endswith("}"):
        text = text[:-1]

    formulas = []
    for line in text.split(ROW_SEPARATOR):
        line = line.strip()
        if line.endswith(";"):
            line = line[:-1].rstrip()
        if line:
            formulas.append(f"={line}")
    return ROW_SEPARATOR.join(formulas)


def replace_content(text: str, pattern: str, replacement: str, per_line: bool = False) -> str:
    """regex substitution over the whole text, or line by line when per_line is set."""
    if not text or not pattern:
        return text

    try:
        regex = re.compile(pattern)
        if per_line:
            return ROW_SEPARATOR.join(regex.sub(replacement, line) for line in text.split(ROW_SEPARATOR))
        return regex.sub(replacement, text)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e
