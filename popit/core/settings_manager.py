import copy
import json
import os
from typing import Dict, Any
from popit.core.constants import AUDIO_ENABLED, MASTER_VOLUME, SFX_VOLUME, POP_VARIATIONS
from popit.core.logger import get_logger

SETTINGS_FILE = "settings.json"

DEFAULT_SETTINGS = {
    "audio": {
        "enabled": AUDIO_ENABLED,
        "master_volume": MASTER_VOLUME,
        "sfx_volume": SFX_VOLUME,
        "variations": POP_VARIATIONS
    }
}

class SettingsManager:
    def __init__(self, path: str = SETTINGS_FILE):
        self.path = path
        self.settings = copy.deepcopy(DEFAULT_SETTINGS)
        self.load()
    
    def load(self):
        """Load settings from file."""
        if not os.path.exists(self.path):
            return
            
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                saved = json.load(f)
                # Merge with defaults to ensure all keys exist
                self._recursive_update(self.settings, saved)
            get_logger().info("Settings loaded")
        except (OSError, ValueError) as e:
            get_logger().error(f"Failed to load settings: {e}")
    
    def save(self):
        """Save settings to file."""
        try:
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4)
            get_logger().info("Settings saved")
        except OSError as e:
            get_logger().error(f"Failed to save settings: {e}")
            
    def _recursive_update(self, base: Dict, update: Dict):
        """Update dictionary recursively, preserving structure."""
        for k, v in update.items():
            if k in base and isinstance(base[k], dict) and isinstance(v, dict):
                self._recursive_update(base[k], v)
            else:
                base[k] = v
                
    def get(self, category: str, key: str) -> Any:
        return self.settings.get(category, {}).get(key)
    
    def set(self, category: str, key: str, value: Any):
        if category not in self.settings:
            self.settings[category] = {}
        self.settings[category][key] = value
        self.save()
