"""Settings management for huectl."""

import json
import os
from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Optional

from config.palette import NamedColorPalette

TOKEN_LENGTH = 40


@dataclass
class BridgeSettings:
    bridge_ip: str = ""
    token: str = ""
    transition_time_ms: int = 400
    timeout: float = 5.0


@dataclass
class Settings:
    bridge: BridgeSettings = field(default_factory=BridgeSettings)


class SettingsManager:
    _instance: Optional['SettingsManager'] = None

    def __new__(cls) -> 'SettingsManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._init()
        return cls._instance

    def _init(self):
        self._settings = Settings()
        self._config_dir = self._get_config_dir()
        self._settings_file = self._config_dir / 'settings.json'
        self._load_settings()

    def _get_config_dir(self) -> Path:
        """Get the config directory, respecting XDG_CONFIG_HOME."""
        xdg_config = os.environ.get('XDG_CONFIG_HOME')
        if xdg_config:
            return Path(xdg_config) / 'huectl'
        # Default: ~/.config/huectl
        return Path.home() / '.config' / 'huectl'

    @classmethod
    def get_instance(cls) -> 'SettingsManager':
        return cls()

    @classmethod
    def reset_instance(cls):
        """Forget the loaded settings so the next access reloads them."""
        cls._instance = None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def bridge(self) -> BridgeSettings:
        return self._settings.bridge

    @property
    def config_dir(self) -> Path:
        return self._config_dir

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    @property
    def token_file(self) -> Path:
        return self._config_dir / 'token'

    @property
    def palette_file(self) -> Path:
        return self._config_dir / 'colors.json'

    def get_token(self) -> str:
        """Resolve the bridge API token.

        Order: HUECTL_TOKEN env var, settings.json, then the token file.
        Returns an empty string when none is set.
        """
        token = os.environ.get('HUECTL_TOKEN', '').strip()
        if token:
            return token
        if self.bridge.token:
            return self.bridge.token
        if self.token_file.exists():
            with open(self.token_file, 'r') as f:
                return f.read().strip()[:TOKEN_LENGTH]
        return ""

    def load_palette(self) -> NamedColorPalette:
        """Load the named color palette; a missing file is an empty palette."""
        if not self.palette_file.exists():
            return NamedColorPalette()
        return NamedColorPalette.load(self.palette_file)

    def save_palette(self, palette: NamedColorPalette):
        self._ensure_config_dir()
        palette.save(self.palette_file)

    def _load_settings(self):
        """Load settings from config file."""
        if self._settings_file.exists():
            try:
                with open(self._settings_file, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise TypeError(f"expected a JSON object, got {type(data).__name__}")

                self._settings.bridge = BridgeSettings(**data.get('bridge', {}))
            except (json.JSONDecodeError, TypeError) as e:
                print(f"Error loading settings: {e}")

        self._validate_settings()

    def save(self):
        """Save settings to config file."""
        self._ensure_config_dir()
        self._validate_settings()

        data = {
            'bridge': asdict(self._settings.bridge),
        }

        with open(self._settings_file, 'w') as f:
            json.dump(data, f, indent=2)

    def _validate_settings(self):
        """Validate and clamp settings to valid ranges."""
        bridge = self._settings.bridge
        bridge.bridge_ip = str(bridge.bridge_ip or "").strip()
        bridge.token = str(bridge.token or "").strip()[:TOKEN_LENGTH]
        try:
            bridge.transition_time_ms = int(bridge.transition_time_ms)
        except (TypeError, ValueError):
            bridge.transition_time_ms = 400
        try:
            bridge.timeout = float(bridge.timeout)
        except (TypeError, ValueError):
            bridge.timeout = 5.0

        bridge.transition_time_ms = max(0, min(60000, bridge.transition_time_ms))
        bridge.timeout = max(0.5, min(60.0, bridge.timeout))

    def _ensure_config_dir(self):
        """Ensure config directory exists."""
        self._config_dir.mkdir(parents=True, exist_ok=True)
