"""
Optimistic synchronisation between the annotation store and the service.

Every mutation is a two phase commit: the local store is changed right away,
then the remote call runs on a worker pool. The completion is handed to
``dispatch`` so it runs on the thread that owns the store (the Qt event loop
in the app, the calling thread in tests). What happens when the remote phase
fails is declared per operation in SYNC_POLICIES.
"""

import logging
from collections import defaultdict
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Optional

from annotate_canvas.models.annotation import Annotation

from .annotation_store import AnnotationStore
from .api_client import AnnotationApiClient
from .exceptions import AuthorizationError, DomainException
from .session import Session

logger = logging.getLogger(__name__)


class SyncPolicy(Enum):
    ROLLBACK = "rollback"  # Undo the local phase.
    LOG_ONLY = "log_only"  # Keep the local state, the next reload reconciles.


SYNC_POLICIES = {
    "create": SyncPolicy.ROLLBACK,
    "update": SyncPolicy.LOG_ONLY,
    "delete": SyncPolicy.LOG_ONLY,
    "list": SyncPolicy.LOG_ONLY,
}


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class SyncService:
    def __init__(
        self,
        store: AnnotationStore,
        api_client: AnnotationApiClient,
        session: Session,
        executor: Optional[Executor] = None,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
    ) -> None:
        self.store = store
        self.api_client = api_client
        self.session = session
        self._executor = executor or ThreadPoolExecutor(
            max_workers=4, thread_name_prefix="annotation-sync"
        )
        self._dispatch = dispatch or _call_now
        self._unauthorized_listeners: List[Callable[[], None]] = []

        # Remote calls for an id whose create has not been answered yet.
        self._pending_creates: dict[str, Future] = {}
        self._waiting: dict[str, list[Callable[[], None]]] = defaultdict(list)

    def on_unauthorized(self, callback: Callable[[], None]) -> None:
        """Register a callback run after the session was rejected."""
        self._unauthorized_listeners.append(callback)

    def has_pending_create(self, annotation_id: str) -> bool:
        return annotation_id in self._pending_creates

    def load(self) -> Future:
        """Replace the store content with the caller's annotations."""
        return self._submit(
            "list",
            self.api_client.list_annotations,
            on_success=self.store.reset,
        )

    def create(self, annotation: Annotation) -> Future:
        """Append locally, then POST. A failed POST removes the record again."""
        self.store.append(annotation)
        future = self._submit(
            "create",
            self.api_client.create_annotation,
            annotation,
            on_success=partial(self._reconcile_created, annotation),
            on_failure=partial(self._rollback_created, annotation.id),
            on_done=partial(self._release_waiting, annotation.id),
        )
        if not future.done():
            self._pending_creates[annotation.id] = future
        return future

    def update(self, annotation: Annotation) -> Optional[Future]:
        """
        Replace locally, then PUT. Failures are logged only.

        Returns None when the record is gone locally, or when the PUT waits
        for the record's create to be answered.
        """
        if not self.store.replace(annotation):
            logger.debug("Skipping update of %s: not in the store", annotation.id)
            return None
        return self._after_create(
            annotation.id,
            partial(self._submit, "update", self.api_client.update_annotation, annotation),
        )

    def delete(self, annotation_id: str) -> Optional[Future]:
        """Remove locally, then DELETE. Failures are logged only."""
        self.store.remove(annotation_id)
        return self._after_create(
            annotation_id,
            partial(self._submit, "delete", self.api_client.delete_annotation, annotation_id),
        )

    def shutdown(self, wait: bool = False) -> None:
        self._executor.shutdown(wait=wait)

    def _after_create(self, annotation_id: str, send: Callable[[], Future]) -> Optional[Future]:
        if annotation_id in self._pending_creates:
            logger.debug("Queueing remote call for %s behind its create", annotation_id)
            self._waiting[annotation_id].append(send)
            return None
        return send()

    def _submit(
        self,
        operation: str,
        fn: Callable[..., Any],
        *args: Any,
        on_success: Optional[Callable[[Any], None]] = None,
        on_failure: Optional[Callable[[BaseException], None]] = None,
        on_done: Optional[Callable[[bool], None]] = None,
    ) -> Future:
        epoch = self.session.epoch
        future = self._executor.submit(fn, *args)
        future.add_done_callback(
            lambda f: self._dispatch(
                partial(self._complete, operation, epoch, f, on_success, on_failure, on_done)
            )
        )
        return future

    def _complete(
        self,
        operation: str,
        epoch: int,
        future: Future,
        on_success: Optional[Callable[[Any], None]],
        on_failure: Optional[Callable[[BaseException], None]],
        on_done: Optional[Callable[[bool], None]],
    ) -> None:
        if epoch != self.session.epoch:
            # The user logged out (or switched) while the call was in flight.
            logger.debug("Dropping %s reply from a previous session", operation)
            if on_done is not None:
                on_done(False)
            return

        error = future.exception()
        if error is None:
            if on_success is not None:
                on_success(future.result())
        else:
            self._log_failure(operation, error)
            if SYNC_POLICIES[operation] is SyncPolicy.ROLLBACK and on_failure is not None:
                on_failure(error)

        if on_done is not None:
            on_done(error is None)

        if isinstance(error, AuthorizationError):
            self.session.clear()
            for callback in list(self._unauthorized_listeners):
                callback()

    def _reconcile_created(self, sent: Annotation, saved: Annotation) -> None:
        current = self.store.get(sent.id)
        if current is None:
            logger.debug("Created annotation %s was removed before the reply", sent.id)
            return
        if current == sent:
            self.store.replace(current.merged_with(saved))
            return
        # Edited locally while the POST was in flight: keep the local edit and
        # only take the fields the server assigns.
        self.store.replace(
            current.model_copy(
                update={
                    "server_id": saved.server_id,
                    "created_at": saved.created_at,
                    "updated_at": saved.updated_at,
                }
            )
        )

    def _rollback_created(self, annotation_id: str, error: BaseException) -> None:
        if self.store.remove(annotation_id) is not None:
            logger.info("Rolled back unsaved annotation %s", annotation_id)

    def _release_waiting(self, annotation_id: str, succeeded: bool) -> None:
        self._pending_creates.pop(annotation_id, None)
        waiting = self._waiting.pop(annotation_id, [])
        if not succeeded:
            if waiting:
                logger.debug(
                    "Dropping %d queued call(s) for unsaved annotation %s",
                    len(waiting),
                    annotation_id,
                )
            return
        for send in waiting:
            send()

    @staticmethod
    def _log_failure(operation: str, error: BaseException) -> None:
        policy = SYNC_POLICIES[operation]
        if isinstance(error, DomainException):
            logger.error(
                "Failed to %s annotation (%s): %s %s",
                operation,
                policy.value,
                error,
                error.log_message or "",
            )
        else:
            logger.error(
                "Unexpected error during annotation %s (%s)",
                operation,
                policy.value,
                exc_info=error,
            )
