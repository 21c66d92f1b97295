from __future__ import annotations

import logging
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from tasklist.config import SETTINGS
from tasklist.domain.enums import Theme
from tasklist.infra.storage import KeyValueStorage

logger = logging.getLogger(__name__)

ThemeListener = Callable[[Theme], None]


class ThemeManager:
    def __init__(
        self,
        storage: KeyValueStorage,
        system_preference: Callable[[], Theme],
        key: str = SETTINGS.theme_storage_key,
    ) -> None:
        self._storage = storage
        self._system_preference = system_preference
        self._key = key
        self._current = Theme.LIGHT
        self._listeners: list[ThemeListener] = []

    @property
    def current_theme(self) -> Theme:
        return self._current

    def subscribe(self, callback: ThemeListener) -> None:
        self._listeners.append(callback)

    def init(self) -> Theme:
        """Apply the saved theme, or the system one when nothing usable is saved."""
        try:
            saved = self._storage.get_item(self._key)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Could not load theme preference: %s", exc)
            saved = None

        if saved in (Theme.LIGHT.value, Theme.DARK.value):
            self._apply(Theme(saved))
        else:
            self._apply(self._system_preference())
        return self._current

    def toggle(self) -> Theme:
        new_theme = Theme.LIGHT if self._current == Theme.DARK else Theme.DARK
        self._apply(new_theme)
        try:
            self._storage.set_item(self._key, new_theme.value)
        except (SQLAlchemyError, OSError) as exc:
            logger.warning("Could not save theme preference: %s", exc)
        return new_theme

    def _apply(self, theme: Theme) -> None:
        self._current = theme
        for callback in list(self._listeners):
            try:
                callback(theme)
            except Exception:  # noqa: BLE001
                logger.exception("Theme listener %r failed", callback)
