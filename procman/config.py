import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import procman.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    Merges default settings with JSON/env overrides.

    Precedence:
    1. Base values from `settings.py`.
    2. Overrides from the environment or a `.env` file (read with `python-dotenv` in settings.py).
    3. Overrides from `overrides.json` for settings in `MODIFIABLE_SETTINGS`.
    """

    def __init__(self, overrides_path: Optional[Path] = None) -> None:
        """Initializes the settings object by loading defaults and overrides."""
        self.OVERRIDES_JSON_PATH: Path = Path(overrides_path or default_settings.OVERRIDES_JSON_PATH)

        self._load_defaults()
        self._load_overrides()

    def _load_defaults(self) -> None:
        """Loads all uppercase attributes from the settings.py module as defaults."""
        for key in dir(default_settings):
            if key.isupper() and key != "OVERRIDES_JSON_PATH":
                setattr(self, key, getattr(default_settings, key))

    def _load_overrides(self) -> None:
        """
        Loads and applies settings from the `overrides.json` file.

        Only keys listed in `MODIFIABLE_SETTINGS` are applied, coerced to the
        type of their default value.
        """
        if not self.OVERRIDES_JSON_PATH.exists():
            return

        try:
            with self.OVERRIDES_JSON_PATH.open('r') as f:
                overrides = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            log.error(f"Failed to load or parse overrides file '{self.OVERRIDES_JSON_PATH}': {e}")
            return

        if not isinstance(overrides, dict):
            log.error(f"Overrides file '{self.OVERRIDES_JSON_PATH}' does not contain an object. Ignoring.")
            return

        log.info(f"Loading runtime configuration overrides from {self.OVERRIDES_JSON_PATH}")
        for key, value in overrides.items():
            if not hasattr(self, key):
                log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
                continue
            if key not in self.MODIFIABLE_SETTINGS:
                log.warning(f"Attempted to override non-modifiable setting '{key}'. Ignoring.")
                continue

            original_value = getattr(self, key)
            try:
                setattr(self, key, type(original_value)(value))
            except (ValueError, TypeError) as e:
                log.error(f"Could not convert value '{value}' for key '{key}'. Error: {e}")
                continue
            log.debug(f"Overridden setting: {key} = {value}")

    def get(self, item: str, default: Any = None) -> Any:
        """Provides dictionary-like access to settings with a default value."""
        return getattr(self, item, default)

    def as_dict(self) -> Dict[str, Any]:
        """Returns every upper-case setting as a dictionary."""
        return {key: value for key, value in vars(self).items() if key.isupper()}


# A singleton instance to be imported by other modules
effective_settings = MergedSettings()
