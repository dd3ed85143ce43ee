"""Service for persisting small user preferences in a YAML file."""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional
from resume_builder.core.config import get_settings

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DARK = "dark"
LIGHT = "light"


class PreferenceStore:
    """Key-value store backed by a YAML mapping on disk."""
    
    def __init__(self, path: Optional[Path] = None):
        """
        Initialize the preference store.
        
        Args:
            path: YAML file holding the preferences. Defaults to the configured preferences_file
        """
        if path is None:
            path = get_settings().preferences_file
        self.path = Path(path)
    
    def get(self, key: str, default: Any = None) -> Any:
        """
        Read a preference.
        
        Args:
            key: Preference key
            default: Value returned when the key is not set
            
        Returns:
            Any: Stored value or default
        """
        return self._load().get(key, default)
    
    def set(self, key: str, value: Any) -> None:
        """Store a preference."""
        data = self._load()
        data[key] = value
        self._save(data)
    
    def remove(self, key: str) -> None:
        """Remove a preference if present."""
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)
    
    def clear(self) -> None:
        """Remove every preference."""
        self._save({})
    
    def is_dark_mode(self, system_prefers_dark: bool = False) -> bool:
        """
        Current light/dark theme preference.
        
        Args:
            system_prefers_dark: System setting used when nothing was saved yet
            
        Returns:
            bool: True for dark mode
        """
        saved = self.get(THEME_KEY)
        if saved in (DARK, LIGHT):
            return saved == DARK
        return system_prefers_dark
    
    def set_dark_mode(self, is_dark: bool) -> None:
        """Save the light/dark theme preference."""
        self.set(THEME_KEY, DARK if is_dark else LIGHT)
    
    def toggle_dark_mode(self, system_prefers_dark: bool = False) -> bool:
        """
        Flip the theme preference.
        
        Returns:
            bool: The new value, True for dark mode
        """
        is_dark = not self.is_dark_mode(system_prefers_dark)
        self.set_dark_mode(is_dark)
        return is_dark
    
    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, OSError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}
    
    def _save(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True, sort_keys=True)
