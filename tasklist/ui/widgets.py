from __future__ import annotations

from PySide6.QtCore import QMimeData, QSize, Qt
from PySide6.QtGui import QDrag
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QGraphicsOpacityEffect,
    QHBoxLayout,
    QLabel,
    QListWidget,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from tasklist.domain.entities import TaskEntity

from .formatting import PRIORITY_COLORS, due_date_text, is_overdue

MIME_PREFIX = "task:"


def _task_id_from_mime(mime: QMimeData) -> str | None:
    if not mime.hasText():
        return None
    text = mime.text()
    if not text.startswith(MIME_PREFIX):
        return None
    return text[len(MIME_PREFIX):] or None


class TaskItemWidget(QWidget):
    def __init__(self, task: TaskEntity, on_toggle, on_delete, parent=None):
        super().__init__(parent)
        self.task = task
        self._on_toggle = on_toggle
        self._on_delete = on_delete

        self.setObjectName("TaskCard")
        self.setAttribute(Qt.WA_StyledBackground, True)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setMinimumHeight(56)
        self.setProperty("completed", task.completed)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(10)

        self.checkbox = QCheckBox()
        self.checkbox.setChecked(task.completed)
        self.checkbox.setToolTip(
            "Mark task as incomplete" if task.completed else "Mark task as complete"
        )
        self.checkbox.toggled.connect(self._handle_toggle)

        # Plain text keeps user input from being read as rich text markup.
        title = QLabel(task.text)
        title.setTextFormat(Qt.PlainText)
        title.setProperty("class", "task-title")
        title.setWordWrap(True)
        title.setMinimumWidth(0)
        title.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        if task.completed:
            font = title.font()
            font.setStrikeOut(True)
            title.setFont(font)

        meta = QHBoxLayout()
        meta.setSpacing(8)
        if task.due_date:
            due = QLabel(due_date_text(task))
            due.setProperty("class", "task-date")
            if is_overdue(task):
                due.setStyleSheet("color: #EF4444;")
            meta.addWidget(due)

        priority = QLabel(task.priority.value)
        priority.setProperty("class", "task-priority")
        priority.setStyleSheet(
            f"background-color: {PRIORITY_COLORS.get(task.priority, '#9CA3AF')};"
            " border-radius: 6px; padding: 1px 6px; color: #111827;"
        )
        priority.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        meta.addWidget(priority)
        meta.addStretch()

        content = QVBoxLayout()
        content.setSpacing(4)
        content.addWidget(title)
        content.addLayout(meta)

        self.delete_button = QPushButton("🗑️")
        self.delete_button.setToolTip("Delete task")
        self.delete_button.setProperty("variant", "ghost")
        self.delete_button.setFixedWidth(36)
        self.delete_button.clicked.connect(self._handle_delete)

        layout.addWidget(self.checkbox, 0, Qt.AlignTop)
        layout.addLayout(content, 1)
        layout.addWidget(self.delete_button, 0, Qt.AlignTop)

    def mark_removing(self) -> None:
        effect = QGraphicsOpacityEffect(self)
        effect.setOpacity(0.35)
        self.setGraphicsEffect(effect)
        self.setEnabled(False)

    def _handle_toggle(self, _checked: bool) -> None:
        self._on_toggle(self.task.id)

    def _handle_delete(self) -> None:
        self._on_delete(self.task.id)


class TaskListWidget(QListWidget):
    """Task cards; dropping one card on another asks for a reorder."""

    def __init__(self, on_reorder, parent=None):
        super().__init__(parent)
        self._on_reorder = on_reorder
        self._h_margin = 12
        self._v_margin = 8
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(True)
        self.setDragDropMode(QAbstractItemView.DragDrop)
        self.setDefaultDropAction(Qt.MoveAction)
        self.setEditTriggers(QAbstractItemView.NoEditTriggers)
        self.setSelectionMode(QAbstractItemView.SingleSelection)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._update_viewport_margins()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self.sync_item_sizes()

    def _update_viewport_margins(self) -> None:
        scrollbar_width = self.verticalScrollBar().width() or self.verticalScrollBar().sizeHint().width()
        right_margin = self._h_margin + (scrollbar_width if self.verticalScrollBar().isVisible() else 0)
        self.setViewportMargins(self._h_margin, self._v_margin, right_margin, self._v_margin)

    def sync_item_sizes(self) -> None:
        self._update_viewport_margins()
        viewport_width = self.viewport().width()
        for index in range(self.count()):
            item = self.item(index)
            widget = self.itemWidget(item)
            if widget:
                widget.setMinimumWidth(viewport_width)
                widget.setMaximumWidth(viewport_width)
                widget.adjustSize()
                hint = widget.sizeHint()
                item.setSizeHint(QSize(viewport_width, hint.height()))
                widget.resize(viewport_width, hint.height())

    def startDrag(self, supportedActions: Qt.DropActions) -> None:  # type: ignore[name-defined]
        item = self.currentItem()
        if not item:
            return
        task_id = item.data(Qt.UserRole)
        if not task_id:
            return
        mime = QMimeData()
        mime.setText(f"{MIME_PREFIX}{task_id}")
        drag = QDrag(self)
        drag.setMimeData(mime)
        drag.exec(Qt.MoveAction)

    def dragEnterEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None:
            event.acceptProposedAction()

    def dragMoveEvent(self, event) -> None:  # type: ignore[override]
        if _task_id_from_mime(event.mimeData()) is not None:
            event.acceptProposedAction()

    def dropEvent(self, event) -> None:  # type: ignore[override]
        dragged_id = _task_id_from_mime(event.mimeData())
        if dragged_id is None:
            return
        pos = event.position().toPoint() if hasattr(event, "position") else event.pos()
        item = self.itemAt(pos)
        if not item:
            return
        target_id = item.data(Qt.UserRole)
        event.acceptProposedAction()
        # The store re-renders the list, so the default item move is skipped.
        if target_id and target_id != dragged_id:
            self._on_reorder(dragged_id, target_id)
