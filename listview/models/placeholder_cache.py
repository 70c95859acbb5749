class PlaceholderCache:
    """Measured pixel height per item index; `None` means not measured yet.

    A height is written once per index and then kept for as long as the item
    occupies that index, so stable items are never measured twice.
    """

    def __init__(self):
        self._heights: list[int | None] = []

    def __len__(self):
        return len(self._heights)

    def get(self, index: int) -> int | None:
        return self._heights[index]

    def height_or_zero(self, index: int) -> int:
        height = self._heights[index]
        return height if height is not None else 0

    def is_measured(self, index: int) -> bool:
        return self._heights[index] is not None

    def set(self, index: int, height) -> bool:
        """Store a measurement; returns False if the index already has one.

        A height of 0 (collapsed or not laid out yet) keeps the slot
        unmeasured so the next reconciliation measures it again.
        """
        if self._heights[index] is not None:
            return False
        if not height:
            return False
        self._heights[index] = int(height)
        return True

    def resize(self, length: int):
        """Truncate or extend to `length`; new entries are unmeasured."""
        length = max(0, int(length))
        if length < len(self._heights):
            del self._heights[length:]
        else:
            self._heights.extend([None] * (length - len(self._heights)))

    def snapshot(self) -> list:
        return list(self._heights)
