import uuid

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SegmentType(str, Enum):
    Caption = "Caption"
    Footnote = "Footnote"
    Formula = "Formula"
    ListItem = "List item"
    PageFooter = "Page footer"
    PageHeader = "Page header"
    Picture = "Picture"
    SectionHeader = "Section header"
    Table = "Table"
    Text = "Text"
    Title = "Title"


class Segment(BaseModel):
    """
    One layout element of the normalized document.

    `page_number` is 0-based. Straight out of the layout service it is
    relative to the batch; after aggregation it is relative to the whole
    document.
    """

    model_config = ConfigDict(frozen=True)

    segment_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    page_number: int = Field(ge=0)
    left: float
    top: float
    width: float
    height: float
    page_width: float
    page_height: float
    text: str
    segment_type: SegmentType


class PdlaSegment(BaseModel):
    """Raw element returned by the layout analysis service (1-based pages)."""

    model_config = ConfigDict(extra="ignore")

    left: float
    top: float
    width: float
    height: float
    page_number: int = Field(ge=1)
    page_width: float
    page_height: float
    text: str = ""
    type: SegmentType

    def to_segment(self) -> Segment:
        return Segment(
            page_number=self.page_number - 1,
            left=self.left,
            top=self.top,
            width=self.width,
            height=self.height,
            page_width=self.page_width,
            page_height=self.page_height,
            text=self.text,
            segment_type=self.type,
        )
