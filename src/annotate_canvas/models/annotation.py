"""Pydantic models shared by the canvas client and the annotation service."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, confloat, constr

DEFAULT_STROKE = "#6366f1"
DEFAULT_FILL = "#6366f155"


class Annotation(BaseModel):
    """A rectangular annotation in canvas-local coordinates.

    ``id`` is generated by the client before the first round trip and is the
    lookup key on both sides. ``server_id``, ``created_at`` and ``updated_at``
    are assigned by the annotation service; ``name`` is a client-only label.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: constr(min_length=1)
    x: float
    y: float
    width: confloat(ge=0)
    height: confloat(ge=0)
    fill: str = DEFAULT_FILL
    stroke: str = DEFAULT_STROKE
    name: Optional[str] = None

    server_id: Optional[str] = Field(default=None, alias="_id")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def to_create_payload(self) -> dict:
        """Body for POST /annotations."""
        return self.model_dump(
            include={"id", "x", "y", "width", "height", "fill", "stroke"}
        )

    def to_update_payload(self) -> dict:
        """Body for PUT /annotations/:id (the full record)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def merged_with(self, saved: "Annotation") -> "Annotation":
        """Take the server's view of the record but keep client-only fields."""
        update = saved.model_dump(exclude_none=True)
        update["id"] = self.id
        update["name"] = self.name
        return self.model_copy(update=update)


class AnnotationPayload(BaseModel):
    """Request body accepted by the create and update routes.

    Unknown keys (such as the client's ``name``) are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    x: float
    y: float
    width: confloat(ge=0)
    height: confloat(ge=0)
    fill: str = "transparent"
    stroke: str = "red"


class Credentials(BaseModel):
    username: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    msg: str
