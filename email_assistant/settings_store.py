"""
In-memory settings store for the panel.

Edits take effect immediately; nothing is written to disk.
"""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from .constants import DEFAULT_SETTINGS
from .models import AppSettings

logger = logging.getLogger(__name__)


class SettingsError(ValueError):
    """A settings edit was rejected."""


class SettingsStore:
    def __init__(self, initial: Optional[AppSettings] = None):
        self._settings = (initial or DEFAULT_SETTINGS).model_copy()

    @property
    def settings(self) -> AppSettings:
        return self._settings

    def replace(self, settings: AppSettings) -> AppSettings:
        self._settings = settings.model_copy()
        return self._settings

    def update(self, **changes: Any) -> AppSettings:
        """
        Apply a partial update, validated as a whole.

        Raises SettingsError (and leaves the settings untouched) on an unknown
        field or a value of the wrong type.
        """
        data: Dict[str, Any] = self._settings.model_dump()
        data.update(changes)
        try:
            updated = AppSettings.model_validate(data)
        except ValidationError as ve:
            raise SettingsError(str(ve)) from ve

        logger.debug("Settings updated: %s", changes)
        self._settings = updated
        return self._settings

    def reset(self) -> AppSettings:
        self._settings = DEFAULT_SETTINGS.model_copy()
        return self._settings
