"""Single-shot QTimer debouncer."""

from PySide6.QtCore import QObject, QTimer


class Debouncer(QObject):
    """
    Runs the most recently scheduled callback once the GUI thread has been
    quiet for `delay_ms`. Scheduling again restarts the timer and replaces
    the pending callback.
    """
    
    def __init__(self, delay_ms: int = 120, parent=None):
        super().__init__(parent)
        self._callback = None
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(delay_ms)
        self._timer.timeout.connect(self._fire)
    
    @property
    def delay_ms(self) -> int:
        return self._timer.interval()
    
    def set_delay(self, delay_ms: int):
        self._timer.setInterval(delay_ms)
    
    @property
    def is_pending(self) -> bool:
        return self._timer.isActive()
    
    def schedule(self, callback):
        self._callback = callback
        self._timer.start()
    
    def cancel(self):
        self._timer.stop()
        self._callback = None
    
    def _fire(self):
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()
