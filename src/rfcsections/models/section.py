"""Section record emitted by the extractor and written to CSV."""

from pydantic import BaseModel, ConfigDict, Field

# Header row, in column order
SECTION_FIELDS: tuple[str, ...] = ("Category", "Name", "Title", "Description", "Notes")


class Section(BaseModel):
    """A single numbered section of an RFC document.

    Attributes:
        category: Title of the top-level section in effect
        name: Section designator (e.g. "4.1.2")
        title: Heading text with the leading separator removed
        description: Normalized body text
        notes: Reserved column, always empty
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    category: str = Field(default="", description="Enclosing top-level section title")
    name: str = Field(..., description="Section designator")
    title: str = Field(default="", description="Section heading")
    description: str = Field(default="", description="Normalized body text")
    notes: str = Field(default="", description="Reserved, always empty")

    def as_row(self) -> list[str]:
        """Return the field values in SECTION_FIELDS order."""
        return [self.category, self.name, self.title, self.description, self.notes]
