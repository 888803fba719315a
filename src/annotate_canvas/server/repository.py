"""
In-memory, owner scoped storage for users and annotations.

Routes run in FastAPI's thread pool, so every repository guards its data
with a lock.
"""

import threading
import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from annotate_canvas.models.annotation import AnnotationPayload


def _object_id() -> str:
    return uuid.uuid4().hex[:24]


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


class StoredUser(BaseModel):
    user_id: str = Field(default_factory=_object_id)
    username: str
    password_hash: str


class StoredAnnotation(BaseModel):
    """Annotation document as the service keeps and returns it."""

    model_config = ConfigDict(populate_by_name=True)

    server_id: str = Field(default_factory=_object_id, alias="_id")
    id: str
    x: float
    y: float
    width: float
    height: float
    fill: str
    stroke: str
    user_id: str = Field(alias="userId")
    created_at: datetime = Field(default_factory=_now, alias="createdAt")
    updated_at: datetime = Field(default_factory=_now, alias="updatedAt")

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class DuplicateAnnotationError(Exception):
    pass


class UserRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._by_id: dict[str, StoredUser] = {}

    def get_by_id(self, user_id: str) -> Optional[StoredUser]:
        with self._lock:
            return self._by_id.get(user_id)

    def get_by_username(self, username: str) -> Optional[StoredUser]:
        with self._lock:
            for user in self._by_id.values():
                if user.username == username:
                    return user
        return None

    def create(self, username: str, password_hash: str) -> Optional[StoredUser]:
        """Store a new user. Returns None if the username is taken."""
        with self._lock:
            if any(u.username == username for u in self._by_id.values()):
                return None
            user = StoredUser(username=username, password_hash=password_hash)
            self._by_id[user.user_id] = user
            return user


class AnnotationRepository:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        # Insertion ordered per owner: {user_id: {annotation_id: StoredAnnotation}}
        self._by_owner: dict[str, dict[str, StoredAnnotation]] = {}

    def list_for(self, user_id: str) -> list[StoredAnnotation]:
        with self._lock:
            return list(self._by_owner.get(user_id, {}).values())

    def create(self, user_id: str, payload: AnnotationPayload) -> StoredAnnotation:
        annotation_id = payload.id or f"rect-{uuid.uuid4().hex}"
        with self._lock:
            owned = self._by_owner.setdefault(user_id, {})
            if annotation_id in owned:
                raise DuplicateAnnotationError(annotation_id)
            record = StoredAnnotation(
                id=annotation_id,
                x=payload.x,
                y=payload.y,
                width=payload.width,
                height=payload.height,
                fill=payload.fill,
                stroke=payload.stroke,
                user_id=user_id,
            )
            owned[annotation_id] = record
            return record

    def update(
        self, user_id: str, annotation_id: str, payload: AnnotationPayload
    ) -> Optional[StoredAnnotation]:
        with self._lock:
            owned = self._by_owner.get(user_id, {})
            record = owned.get(annotation_id)
            if record is None:
                return None
            record = record.model_copy(
                update={
                    "x": payload.x,
                    "y": payload.y,
                    "width": payload.width,
                    "height": payload.height,
                    "fill": payload.fill,
                    "stroke": payload.stroke,
                    "updated_at": _now(),
                }
            )
            owned[annotation_id] = record
            return record

    def delete(self, user_id: str, annotation_id: str) -> bool:
        with self._lock:
            owned = self._by_owner.get(user_id, {})
            return owned.pop(annotation_id, None) is not None
