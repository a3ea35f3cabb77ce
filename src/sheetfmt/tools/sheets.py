"""helpers for spreadsheet ids, urls and sheet references."""
import re
from typing import List

from ..domain.errors import ReferenceFormatError
from ..domain.models import SheetReference

SPREADSHEET_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/edit#gid=0"

SHEET_ID_PATTERN = re.compile(r"/d/([A-Za-z0-9_-]+)")
IMPORTRANGE_PATTERN = re.compile(r'IMPORTRANGE\(\s*"([^"]*)"', re.IGNORECASE)
INDIRECT_PATTERN = re.compile(r'^=?\s*INDIRECT\(\s*"(.*)"\s*\)$', re.IGNORECASE)


def sheet_url(text: str) -> str:
    """
    url for a spreadsheet.

    quotes and any query string are dropped. anything that already looks like
    a url is returned as it is, otherwise the text is taken as a spreadsheet id.
    """
    text = text.replace('"', "").split("?", 1)[0].strip()
    if "https" in text:
        return text
    return SPREADSHEET_URL.format(sheet_id=text)


def extract_sheet_id(line: str) -> str:
    match = IMPORTRANGE_PATTERN.search(line)
    if match:
        line = match.group(1)

    match = SHEET_ID_PATTERN.search(line)
    if match:
        return match.group(1)
    return line.replace('"', "").strip()


def extract_sheet_ids(text: str) -> str:
    """replace each spreadsheet url (or IMPORTRANGE call) in text with its id, one per line."""
    ids: List[str] = [extract_sheet_id(line) for line in text.split("\n")]
    return "\n".join(ids)


def parse_reference(text: str) -> SheetReference:
    """parse Sheet!Range, unquoting 'Quoted Sheet' names."""
    text = text.strip()
    if "!" not in text:
        raise ReferenceFormatError(f"'{text}' is not a sheet reference (expected Sheet!Range)")

    sheet, cells = text.rsplit("!", 1)
    if len(sheet) >= 2 and sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1].replace("''", "'")
    if not sheet or not cells:
        raise ReferenceFormatError(f"'{text}' is missing a sheet name or range")
    return SheetReference(sheet=sheet, range=cells)


def convert_reference(text: str) -> str:
    """
    toggle between a direct reference and its INDIRECT() form.

    INDIRECT("Sheet!A1") becomes Sheet!A1; 'Sheet'!$A$1 becomes INDIRECT("Sheet!A1").
    """
    text = text.strip()
    match = INDIRECT_PATTERN.match(text)
    if match:
        return match.group(1)
    return parse_reference(text).to_indirect()
