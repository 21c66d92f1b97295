from __future__ import annotations

import logging

from PySide6.QtCore import QDate, Qt, QTimer
from PySide6.QtGui import QKeySequence, QShortcut
from PySide6.QtWidgets import (
    QButtonGroup,
    QComboBox,
    QDateEdit,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from tasklist.domain.entities import TaskEntity
from tasklist.domain.enums import Priority, TaskFilter, Theme
from tasklist.domain.errors import ValidationError
from tasklist.services.task_store import TaskStore
from tasklist.services.theme import ThemeManager

from .formatting import FILTERS, PRIORITY_OPTIONS, stats_text, theme_icon
from .widgets import TaskItemWidget, TaskListWidget

logger = logging.getLogger(__name__)

REMOVE_DELAY_MS = 300


class MainWindow(QWidget):
    def __init__(self, store: TaskStore, themes: ThemeManager):
        super().__init__()
        self.setWindowTitle("Task List")
        self.resize(720, 760)

        self.store = store
        self.themes = themes
        self.current_filter = TaskFilter.ALL

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        layout.addLayout(self._build_header())
        layout.addWidget(self._build_input_bar())
        layout.addLayout(self._build_filter_bar())

        self.task_list = TaskListWidget(on_reorder=self.on_reorder_tasks)
        self.task_list.setObjectName("TaskList")
        self.task_list.setSpacing(8)

        self.empty_label = QLabel("No tasks here yet.")
        self.empty_label.setObjectName("EmptyState")
        self.empty_label.setAlignment(Qt.AlignCenter)

        layout.addWidget(self.task_list, 1)
        layout.addWidget(self.empty_label)

        self.store.subscribe(self.on_tasks_changed)
        self.themes.subscribe(self.on_theme_changed)
        self.on_theme_changed(self.themes.current_theme)
        self.render_current_view()

        QShortcut(QKeySequence("Ctrl+Return"), self, self.handle_add_task)
        QShortcut(QKeySequence("Ctrl+Enter"), self, self.handle_add_task)

    def _build_header(self) -> QHBoxLayout:
        header = QHBoxLayout()
        title = QLabel("My tasks")
        title.setProperty("class", "panel-title")

        self.stats_label = QLabel("")
        self.stats_label.setProperty("class", "stats-badge")

        self.theme_button = QPushButton()
        self.theme_button.setObjectName("ThemeToggle")
        self.theme_button.setToolTip("Toggle theme")
        self.theme_button.setFixedWidth(40)
        self.theme_button.clicked.connect(self.themes.toggle)

        header.addWidget(title)
        header.addStretch()
        header.addWidget(self.stats_label)
        header.addWidget(self.theme_button)
        return header

    def _build_input_bar(self) -> QWidget:
        frame = QFrame()
        frame.setObjectName("ActionBar")
        layout = QHBoxLayout(frame)
        layout.setContentsMargins(12, 10, 12, 10)
        layout.setSpacing(8)

        self.task_input = QLineEdit()
        self.task_input.setPlaceholderText("What needs to be done?")
        self.task_input.returnPressed.connect(self.handle_add_task)

        self.due_toggle = QPushButton("No due date")
        self.due_toggle.setCheckable(True)
        self.due_toggle.setProperty("variant", "secondary")
        self.due_toggle.toggled.connect(self.on_due_toggled)

        self.due_input = QDateEdit()
        self.due_input.setCalendarPopup(True)
        self.due_input.setDate(QDate.currentDate())
        self.due_input.setEnabled(False)

        self.priority_combo = QComboBox()
        for label, value in PRIORITY_OPTIONS:
            self.priority_combo.addItem(label, value.value)
        self._reset_priority()

        add_button = QPushButton("Add")
        add_button.clicked.connect(self.handle_add_task)

        layout.addWidget(self.task_input, 1)
        layout.addWidget(self.due_toggle)
        layout.addWidget(self.due_input)
        layout.addWidget(self.priority_combo)
        layout.addWidget(add_button)
        return frame

    def _build_filter_bar(self) -> QHBoxLayout:
        bar = QHBoxLayout()
        bar.setSpacing(6)
        self.filter_group = QButtonGroup(self)
        self.filter_group.setExclusive(True)
        self.filter_buttons: dict[str, QPushButton] = {}
        for label, key in FILTERS:
            button = QPushButton(label)
            button.setCheckable(True)
            button.setProperty("variant", "ghost")
            button.setProperty("filter", key)
            button.clicked.connect(lambda _checked=False, value=key: self.handle_filter_change(value))
            self.filter_group.addButton(button)
            self.filter_buttons[key] = button
            bar.addWidget(button)
        bar.addStretch()
        self._update_filter_buttons()
        return bar

    def handle_add_task(self) -> None:
        data = {
            "text": self.task_input.text(),
            "due_date": self.due_input.date().toPython() if self.due_toggle.isChecked() else None,
            "priority": self.priority_combo.currentData(),
        }
        try:
            self.store.add_task(data)
        except ValidationError as exc:
            logger.warning("Task not added: %s", exc)
            self.task_input.setFocus()
            return
        self._clear_inputs()

    def handle_toggle_task(self, task_id: str) -> None:
        self.store.toggle_task(task_id)

    def handle_delete_task(self, task_id: str) -> None:
        widget = self._find_task_widget(task_id)
        if widget is None:
            return
        widget.mark_removing()
        QTimer.singleShot(REMOVE_DELAY_MS, lambda: self.store.delete_task(task_id))

    def handle_filter_change(self, key: str) -> None:
        self.current_filter = TaskFilter(key)
        self._update_filter_buttons()
        self.render_current_view()

    def on_reorder_tasks(self, dragged_id: str, target_id: str) -> None:
        self.store.reorder_tasks(dragged_id, target_id)

    def on_tasks_changed(self, _tasks: list[TaskEntity]) -> None:
        self.render_current_view()

    def on_theme_changed(self, theme: Theme) -> None:
        self.theme_button.setText(theme_icon(theme))

    def on_due_toggled(self, checked: bool) -> None:
        self.due_input.setEnabled(checked)
        self.due_toggle.setText("Due date" if checked else "No due date")

    def render_current_view(self) -> None:
        tasks = self.store.get_filtered_tasks(self.current_filter)
        self.task_list.clear()

        for task in tasks:
            item = QListWidgetItem()
            item.setData(Qt.UserRole, task.id)
            widget = TaskItemWidget(task, self.handle_toggle_task, self.handle_delete_task)
            self.task_list.addItem(item)
            self.task_list.setItemWidget(item, widget)
            item.setSizeHint(widget.sizeHint())

        self.empty_label.setVisible(not tasks)
        self.task_list.setVisible(bool(tasks))
        self.stats_label.setText(stats_text(self.store.get_stats()))
        self.task_list.sync_item_sizes()

    def _find_task_widget(self, task_id: str) -> TaskItemWidget | None:
        for index in range(self.task_list.count()):
            item = self.task_list.item(index)
            if item.data(Qt.UserRole) == task_id:
                widget = self.task_list.itemWidget(item)
                if isinstance(widget, TaskItemWidget):
                    return widget
        return None

    def _update_filter_buttons(self) -> None:
        for key, button in self.filter_buttons.items():
            button.setChecked(key == self.current_filter.value)

    def _reset_priority(self) -> None:
        index = self.priority_combo.findData(Priority.MEDIUM.value)
        if index >= 0:
            self.priority_combo.setCurrentIndex(index)

    def _clear_inputs(self) -> None:
        self.task_input.clear()
        self.task_input.setFocus()
        self.due_toggle.setChecked(False)
        self.due_input.setDate(QDate.currentDate())
        self._reset_priority()
