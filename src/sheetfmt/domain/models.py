from pydantic import BaseModel, Field


class FormatSettings(BaseModel):
    """settings applied when formatting formulas."""
    indent_width: int = Field(default=4, ge=1, le=16)
    strict: bool = False

    @property
    def indent(self) -> str:
        return " " * self.indent_width


class SheetReference(BaseModel):
    """a sheet-qualified cell or range reference, e.g. 'My Sheet'!$A$1."""
    sheet: str
    range: str

    @property
    def bare_range(self) -> str:
        """range with absolute markers removed."""
        return self.range.replace("$", "")

    def to_indirect(self) -> str:
        return f'INDIRECT("{self.sheet}!{self.bare_range}")'
