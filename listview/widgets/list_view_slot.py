from PySide6.QtWidgets import QSizePolicy, QVBoxLayout, QWidget


class ListViewSlot(QWidget):
    """Layout cell for one item.

    While visible the slot hosts the widget built by the item factory; while
    invisible it only reserves the measured placeholder height. With
    ``keep_alive`` the item widget is hidden instead of destroyed so it can be
    shown again without rebuilding.
    """

    def __init__(self, item, item_factory, parent=None, *, keep_alive: bool = True):
        super().__init__(parent)
        self.setObjectName("listViewItem")
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)
        self._item = item
        self._item_factory = item_factory
        self._keep_alive = keep_alive
        self._widget = None
        self._content_visible = False
        self._placeholder_height = None

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

    def item(self):
        return self._item

    def item_widget(self):
        return self._widget

    def is_content_visible(self) -> bool:
        return self._content_visible

    def placeholder_height(self):
        return self._placeholder_height

    def set_item(self, item):
        """Rebind the slot to a new payload at the same index."""
        if item is self._item:
            return
        self._item = item
        if self._widget is not None:
            self._drop_widget()
            if self._content_visible:
                self._mount()

    def set_placeholder_height(self, height: int):
        self._placeholder_height = int(height)
        self.setFixedHeight(self._placeholder_height)

    def set_content_visible(self, visible: bool):
        visible = bool(visible)
        if visible == self._content_visible:
            return
        self._content_visible = visible
        if visible:
            self._mount()
        elif self._widget is not None:
            if self._keep_alive:
                self._widget.hide()
            else:
                self._drop_widget()

    def _mount(self):
        if self._widget is None:
            self._widget = self._item_factory(self._item, self)
            self.layout().addWidget(self._widget)
        self._widget.show()

    def _drop_widget(self):
        widget = self._widget
        self._widget = None
        self.layout().removeWidget(widget)
        widget.hide()
        widget.deleteLater()
