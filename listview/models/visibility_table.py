from PySide6.QtCore import QObject, Signal


class VisibilityTable(QObject):
    """Per-index render flag observed by the host through `flag_changed`."""

    flag_changed = Signal(int, bool)
    resized = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self._flags: list[bool] = []

    def __len__(self):
        return len(self._flags)

    def __iter__(self):
        return iter(self._flags)

    def get(self, index: int) -> bool:
        return self._flags[index]

    def set(self, index: int, visible: bool) -> bool:
        """Write a flag; emits `flag_changed` and returns True only on change."""
        visible = bool(visible)
        if self._flags[index] == visible:
            return False
        self._flags[index] = visible
        self.flag_changed.emit(index, visible)
        return True

    def resize(self, length: int, fill: bool = True):
        """Truncate or extend to `length`; new entries start as `fill`."""
        length = max(0, int(length))
        if length == len(self._flags):
            return
        if length < len(self._flags):
            del self._flags[length:]
        else:
            self._flags.extend([bool(fill)] * (length - len(self._flags)))
        self.resized.emit(length)

    def index_of(self, value: bool = True) -> int:
        try:
            return self._flags.index(value)
        except ValueError:
            return -1

    def last_index_of(self, value: bool = True) -> int:
        for i in range(len(self._flags) - 1, -1, -1):
            if self._flags[i] == value:
                return i
        return -1

    def visible_range(self) -> tuple[int, int] | None:
        start = self.index_of(True)
        if start < 0:
            return None
        return start, self.last_index_of(True)

    def snapshot(self) -> list:
        return list(self._flags)
