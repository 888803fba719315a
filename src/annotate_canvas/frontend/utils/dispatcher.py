from typing import Callable

from PyQt6.QtCore import QObject, pyqtSignal


class QtDispatcher(QObject):
    """
    Runs callables on the thread that owns this object (the GUI thread).

    The sync service calls it from worker threads when a request finishes;
    the queued signal connection moves the completion onto the event loop.
    """

    _invoke = pyqtSignal(object)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._invoke.connect(self._run)

    def __call__(self, fn: Callable[[], None]) -> None:
        self._invoke.emit(fn)

    def _run(self, fn: Callable[[], None]) -> None:
        fn()
