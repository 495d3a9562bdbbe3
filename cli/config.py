"""
CLI Configuration Management
"""

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any


@dataclass
class CLIConfig:
    """Configuration for the X-Recruit CLI"""

    # API settings
    api_base_url: str = "http://localhost:3001/api"
    timeout: int = 30

    # Session settings
    session_file: str = "session.json"

    # Paths
    config_dir: str = field(default_factory=lambda: str(Path.home() / ".xrecruit"))

    def __post_init__(self):
        self._resolve_paths()

    def _resolve_paths(self) -> None:
        # Relative session files live in the config directory
        if not os.path.isabs(self.session_file):
            self.session_file = str(Path(self.config_dir) / self.session_file)

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file"""
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = json.load(f)
                for key, value in data.items():
                    if hasattr(self, key):
                        setattr(self, key, value)
            self._resolve_paths()

    def save_to_file(self, config_path: Optional[str] = None) -> None:
        """Save configuration to JSON file"""
        path = Path(config_path or (Path(self.config_dir) / "config.json"))
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(asdict(self), f, indent=2)

    @classmethod
    def load_default(cls) -> "CLIConfig":
        """Load default configuration from user config directory"""
        config = cls(config_dir=os.environ.get("XRECRUIT_CONFIG_DIR") or str(Path.home() / ".xrecruit"))
        default_config_path = Path(config.config_dir) / "config.json"
        if default_config_path.exists():
            config.load_from_file(str(default_config_path))

        # Override with environment variables
        config._load_from_env()

        return config

    def _load_from_env(self) -> None:
        """Load configuration from environment variables"""
        env_mappings = {
            "XRECRUIT_API_URL": ("api_base_url", lambda x: x.rstrip("/")),
            "XRECRUIT_TIMEOUT": ("timeout", int),
        }

        for env_var, (attr, converter) in env_mappings.items():
            value = os.environ.get(env_var)
            if value:
                setattr(self, attr, converter(value))

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)
