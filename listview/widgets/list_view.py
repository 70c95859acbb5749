from functools import partial

from PySide6.QtCore import QCoreApplication, QPoint, QTimer, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QLayout, QScrollArea, QVBoxLayout, QWidget

from listview.models.placeholder_cache import PlaceholderCache
from listview.models.visibility_table import VisibilityTable
from listview.utils.flow_log import log_flow
from listview.utils.frame_batch import FrameBatcher
from listview.widgets.list_view_context import ListViewConfig, ScrollDirection, ScrollState
from listview.widgets.list_view_reconcile_service import ListViewReconcileService
from listview.widgets.list_view_scroll_service import ListViewScrollService
from listview.widgets.list_view_slot import ListViewSlot
from listview.widgets.list_view_window_scanner_service import WindowScannerService


class ListView(QWidget):
    """Vertical list that only mounts items near the viewport.

    Every item gets a `ListViewSlot`. Slots inside the preload window host a
    real item widget; the others keep their measured height so the scroll
    extent does not change while items are mounted and unmounted.

    By default the list scrolls with the nearest enclosing `QScrollArea` (the
    "window"). With ``scroll_inside`` it wraps itself in its own scroll area.
    """

    scrolled_to_end = Signal()  # Emitted at end of list when no load_more callback is set
    visibility_updated = Signal()

    def __init__(self, item_factory, parent=None, *, preload_screens=None, scroll_inside=None,
                 load_more=None, throttle_ms=None, keep_alive: bool = True):
        super().__init__(parent)
        self.setObjectName("listView")
        self.config = ListViewConfig.from_settings(
            preload_screens=preload_screens,
            scroll_inside=scroll_inside,
            throttle_ms=throttle_ms,
            load_more=load_more,
        )
        self.scroll_state = ScrollState()
        self.placeholders = PlaceholderCache()
        self.visibility = VisibilityTable(self)
        self.batcher = FrameBatcher()
        self._cached_scroll_height = 0

        self._item_factory = item_factory
        self._keep_alive = keep_alive
        self._items = []
        self._slots: list[ListViewSlot] = []
        self._list_start = None
        self._list_end = None
        self._scroll_area = None
        self._attached = False
        self._torn_down = False
        self._render_scheduled = False

        self._content = QWidget()
        self._content.setObjectName("listViewContent")
        content_layout = QVBoxLayout(self._content)
        content_layout.setContentsMargins(0, 0, 0, 0)
        content_layout.setSpacing(0)
        # Never squeeze slots below their height; the content grows instead.
        content_layout.setSizeConstraint(QLayout.SizeConstraint.SetMinimumSize)
        self._start_layout = QVBoxLayout()
        self._slot_layout = QVBoxLayout()
        self._end_layout = QVBoxLayout()
        for sub in (self._start_layout, self._slot_layout, self._end_layout):
            sub.setContentsMargins(0, 0, 0, 0)
            sub.setSpacing(0)
            content_layout.addLayout(sub)
        content_layout.addStretch(1)

        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.setSpacing(0)
        if self.config.scroll_inside:
            self._inner_scroll = QScrollArea(self)
            self._inner_scroll.setWidgetResizable(True)
            self._inner_scroll.setWidget(self._content)
            outer.addWidget(self._inner_scroll)
        else:
            self._inner_scroll = None
            outer.addWidget(self._content)

        self.visibility.flag_changed.connect(self._on_flag_changed)
        self._scroll_service = ListViewScrollService(self)
        self._window_scanner_service = WindowScannerService(self)
        self._reconcile_service = ListViewReconcileService(self)
        # An embedded view never gets closeEvent; release the scroll source on destruction.
        self.destroyed.connect(partial(_release_on_destroy, self._scroll_service, self.batcher))

    # Public API -----------------------------------------------------
    def items(self) -> list:
        return list(self._items)

    def set_items(self, items):
        """Replace the item list; growth appends slots, shrink drops them from the tail."""
        items = list(items)
        old_len = len(self._items)
        self._items = items
        self._reconcile_service.on_items_changed(old_len, len(items))

    def set_list_start(self, widget: QWidget | None):
        self._list_start = self._swap_edge_widget(self._start_layout, self._list_start, widget)

    def set_list_end(self, widget: QWidget | None):
        self._list_end = self._swap_edge_widget(self._end_layout, self._list_end, widget)

    def slot(self, index: int) -> ListViewSlot:
        return self._slots[index]

    def sync_now(self):
        """Run pending measurement and scans synchronously."""
        # Slots added to a visible layout are shown through posted events.
        QCoreApplication.sendPostedEvents()
        self._on_render_complete()
        self.batcher.flush()

    def teardown(self):
        """Detach from the scroll source; pending jobs become no-ops."""
        if self._torn_down:
            return
        self._torn_down = True
        self._scroll_service.detach()
        if self._scroll_area is not None:
            try:
                self._scroll_area.verticalScrollBar().valueChanged.disconnect(self._on_scroll_value_changed)
            except (RuntimeError, TypeError):
                pass
        self._scroll_area = None
        log_flow("SCROLL", "Scroll listener detached", level="INFO")

    # Layout access used by the services ------------------------------
    def root(self):
        return None if self._torn_down else self._content

    def scroll_offset(self) -> int:
        if self._scroll_area is None:
            return 0
        return self._scroll_area.verticalScrollBar().value()

    def scroll_height(self) -> int:
        content = self._scroll_content()
        return max(content.height(), content.sizeHint().height())

    def element_count(self) -> int:
        return len(self._slots)

    def has_element(self, index: int) -> bool:
        return 0 <= index < len(self._slots)

    def offset_top(self, index: int) -> int:
        slot = self._slots[index]
        content = self._scroll_content()
        if content.isAncestorOf(slot):
            return slot.mapTo(content, QPoint(0, 0)).y()
        return slot.y()

    def offset_height(self, index: int) -> int:
        return self._slots[index].height()

    # Qt events -------------------------------------------------------
    def showEvent(self, event):
        super().showEvent(event)
        if not self._attached and not self._torn_down:
            self._attach_scroll_source()
            if self._reconcile_service.pending:
                self._schedule_render_complete()

    def closeEvent(self, event):
        self.teardown()
        super().closeEvent(event)

    # Internal -------------------------------------------------------
    def _scroll_content(self) -> QWidget:
        if self._scroll_area is not None and self._scroll_area.widget() is not None:
            return self._scroll_area.widget()
        return self._content

    def _find_window_scroll_area(self):
        parent = self.parentWidget()
        while parent is not None:
            if isinstance(parent, QScrollArea):
                return parent
            parent = parent.parentWidget()
        return None

    def _attach_scroll_source(self):
        self._attached = True
        if self.config.scroll_inside:
            self._scroll_area = self._inner_scroll
        else:
            self._scroll_area = self._find_window_scroll_area()

        # Captured once; resizing the viewport later does not change the window.
        if self._scroll_area is not None:
            viewport_height = self._scroll_area.viewport().height()
        else:
            viewport_height = self.window().height()
        if viewport_height <= 0:
            screen = QGuiApplication.primaryScreen()
            viewport_height = screen.availableGeometry().height() if screen is not None else 0
        self.config.viewport_height = float(viewport_height)

        if self._scroll_area is not None:
            self._scroll_area.verticalScrollBar().valueChanged.connect(self._on_scroll_value_changed)
            self.scroll_state.position = float(self.scroll_offset())
        log_flow(
            "SCROLL",
            f"Attached inside={self.config.scroll_inside} viewport={viewport_height} "
            f"preload={self.config.preload_distance:.0f}",
            level="INFO",
        )

    def _request_render(self):
        """Mount slots for the current items, then schedule phase two of reconciliation."""
        items = self._items
        while len(self._slots) > len(items):
            slot = self._slots.pop()
            self._slot_layout.removeWidget(slot)
            slot.hide()
            slot.deleteLater()
        for index, slot in enumerate(self._slots):
            slot.set_item(items[index])
        for index in range(len(self._slots), len(items)):
            slot = ListViewSlot(items[index], self._item_factory, self._content, keep_alive=self._keep_alive)
            self._slot_layout.addWidget(slot)
            self._slots.append(slot)
            slot.set_content_visible(self.visibility.get(index))
            if self._content.isVisible():
                slot.show()
        if self._attached:
            self._schedule_render_complete()

    def _schedule_render_complete(self):
        if self._render_scheduled:
            return
        self._render_scheduled = True
        QTimer.singleShot(0, self._on_render_complete)

    def _on_render_complete(self):
        self._render_scheduled = False
        if self._torn_down:
            return
        self._activate_layouts()
        self._reconcile_service.on_render_complete()

    def _activate_layouts(self):
        self._content.layout().activate()
        content = self._scroll_content()
        if content is not self._content and content.layout() is not None:
            content.layout().activate()

    def _on_scroll_value_changed(self, _value):
        self._scroll_service.on_raw_scroll()

    def _check_visibility(self, direction: ScrollDirection = ScrollDirection.UNKNOWN):
        self._window_scanner_service.check_visibility(direction)

    def _on_flag_changed(self, index: int, visible: bool):
        if index >= len(self._slots):
            return
        slot = self._slots[index]
        if not visible:
            height = self.placeholders.get(index)
            if height is not None:
                slot.set_placeholder_height(height)
        slot.set_content_visible(visible)

    def _swap_edge_widget(self, layout, old, new):
        if old is not None:
            layout.removeWidget(old)
            old.hide()
            old.deleteLater()
        if new is not None:
            layout.addWidget(new)
            new.show()
        return new


def _release_on_destroy(scroll_service, batcher, *_args):
    # Called from the view's destructor: only plain Python state is touched.
    scroll_service.detach()
    batcher.discard_pending()
