"""Queue envelope and task payload definitions."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ExtractionPayload(BaseModel):
    """One document's extraction request, as enqueued by the task producer."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    task_id: str
    user_id: str
    input_location: str = Field(
        description="Source blob location, carrying the file extension."
    )
    output_location: str = Field(
        description="Destination for the serialized segment list."
    )
    batch_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="Pages per batch. None processes the whole document at once.",
    )
    model: str = Field(description="Layout analysis variant, e.g. Fast.")


class QueuePayload(BaseModel):
    """Delivery envelope for one queue item."""

    model_config = ConfigDict(frozen=True)

    payload: dict[str, Any]
    attempt: int = Field(ge=1)
    max_attempts: int = Field(ge=1)
    item_id: str
    queue_name: str


class ProducePayload(BaseModel):
    """Request to enqueue a new item."""

    queue_name: str
    payload: dict[str, Any]
    item_id: str
    max_attempts: Optional[int] = None
