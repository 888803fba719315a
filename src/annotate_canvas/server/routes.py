"""Auth and annotation routes of the annotation service."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from annotate_canvas.models.annotation import (
    AnnotationPayload,
    Credentials,
    MessageResponse,
    TokenResponse,
)

from .repository import AnnotationRepository, DuplicateAnnotationError, UserRepository
from .security import create_token, hash_password, require_user, verify_password

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])
annotations_router = APIRouter(prefix="/annotations", tags=["annotations"])

NOT_FOUND = "Annotation not found"


def get_users(request: Request) -> UserRepository:
    return request.app.state.users


def get_annotations(request: Request) -> AnnotationRepository:
    return request.app.state.annotations


@auth_router.post("/register", response_model=TokenResponse)
def register(
    credentials: Credentials,
    request: Request,
    users: UserRepository = Depends(get_users),
) -> TokenResponse:
    user = users.create(credentials.username, hash_password(credentials.password))
    if user is None:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "User already exists")
    logger.info("Registered user %s", credentials.username)
    return TokenResponse(token=create_token(user.user_id, request.app.state.settings))


@auth_router.post("/login", response_model=TokenResponse)
def login(
    credentials: Credentials,
    request: Request,
    users: UserRepository = Depends(get_users),
) -> TokenResponse:
    user = users.get_by_username(credentials.username)
    if user is None or not verify_password(user.password_hash, credentials.password):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid Credentials")
    return TokenResponse(token=create_token(user.user_id, request.app.state.settings))


@annotations_router.get("")
def list_annotations(
    user_id: str = Depends(require_user),
    annotations: AnnotationRepository = Depends(get_annotations),
) -> list[dict]:
    return [record.to_response() for record in annotations.list_for(user_id)]


@annotations_router.post("")
def create_annotation(
    payload: AnnotationPayload,
    user_id: str = Depends(require_user),
    annotations: AnnotationRepository = Depends(get_annotations),
) -> dict:
    try:
        record = annotations.create(user_id, payload)
    except DuplicateAnnotationError:
        raise HTTPException(status.HTTP_409_CONFLICT, "Annotation already exists")
    logger.debug("User %s created annotation %s", user_id, record.id)
    return record.to_response()


@annotations_router.put("/{annotation_id}")
def update_annotation(
    annotation_id: str,
    payload: AnnotationPayload,
    user_id: str = Depends(require_user),
    annotations: AnnotationRepository = Depends(get_annotations),
) -> dict:
    record = annotations.update(user_id, annotation_id, payload)
    if record is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return record.to_response()


@annotations_router.delete("/{annotation_id}", response_model=MessageResponse)
def delete_annotation(
    annotation_id: str,
    user_id: str = Depends(require_user),
    annotations: AnnotationRepository = Depends(get_annotations),
) -> MessageResponse:
    if not annotations.delete(user_id, annotation_id):
        raise HTTPException(status.HTTP_404_NOT_FOUND, NOT_FOUND)
    return MessageResponse(msg="Annotation removed")
