"""
JSON-based project configuration for hand_posing.

Configuration hierarchy (later overrides earlier):
1. Built-in defaults (config.py)
2. User config (~/.handposing.json)
3. Project config (./.handposing.json or next to the scene file)
4. CLI arguments

Example .handposing.json:
{
    "geometry": {
        "epsilon": 1e-12,
        "angle_tie_tolerance_deg": 1e-6
    },
    "logging": {
        "level": "INFO",
        "json_file": "hand_posing.log.json",
        "use_colors": true,
        "verbose": false
    }
}
"""

import json
import logging
from dataclasses import dataclass, field, asdict, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".handposing.json"


@dataclass
class GeometryConfig:
    """Numerical thresholds of the surface geometry."""
    epsilon: float = 1e-12
    angle_tie_tolerance_deg: float = 1e-6


@dataclass
class LoggingConfig:
    """Logging output configuration."""
    level: str = "INFO"
    json_file: Optional[str] = None
    use_colors: bool = True
    verbose: bool = False

    @property
    def level_number(self) -> int:
        """Numeric logging level; unknown names fall back to INFO."""
        value = logging.getLevelName(self.level.upper())
        return value if isinstance(value, int) else logging.INFO


@dataclass
class ProjectConfig:
    """Complete project configuration."""
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.to_json())
        logger.info("Configuration saved to %s", path)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProjectConfig':
        """Create configuration from dictionary.

        Unknown sections and keys (including ``_comment``) are ignored.
        """
        config = cls()
        for section in fields(cls):
            values = data.get(section.name)
            if not isinstance(values, dict):
                continue
            target = getattr(config, section.name)
            for key, value in values.items():
                if hasattr(target, key) and not key.startswith("_"):
                    setattr(target, key, value)
        return config

    @classmethod
    def from_json(cls, json_str: str) -> 'ProjectConfig':
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Union[str, Path]) -> 'ProjectConfig':
        """Load configuration from JSON file.

        Raises:
            FileNotFoundError: If file doesn't exist
            json.JSONDecodeError: If file is not valid JSON
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        logger.info("Configuration loaded from %s", path)
        return cls.from_dict(data)


def find_config_file(
    scene_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> Optional[Path]:
    """Find configuration file using search hierarchy.

    Search order:
    1. Explicit config path (if provided)
    2. .handposing.json in the scene file's directory
    3. .handposing.json in current working directory
    4. ~/.handposing.json in user's home directory

    Returns:
        Path to config file if found, None otherwise
    """
    if explicit_config:
        explicit = Path(explicit_config)
        if explicit.exists():
            return explicit
        logger.warning("Explicit config not found: %s", explicit)

    candidates = []
    if scene_path:
        candidates.append(Path(scene_path).parent / CONFIG_FILENAME)
    candidates.append(Path.cwd() / CONFIG_FILENAME)
    candidates.append(Path.home() / CONFIG_FILENAME)

    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def load_config(
    scene_path: Optional[Union[str, Path]] = None,
    explicit_config: Optional[Union[str, Path]] = None,
) -> ProjectConfig:
    """Load configuration with fallback to defaults."""
    config_path = find_config_file(scene_path, explicit_config)

    if config_path:
        try:
            return ProjectConfig.load(config_path)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load config %s: %s", config_path, e)

    return ProjectConfig()


def apply_config_to_globals(config: ProjectConfig) -> None:
    """Apply configuration to global constants in config.py (in place)."""
    from hand_posing import config as cfg

    cfg.EPSILON = float(config.geometry.epsilon)
    cfg.ANGLE_TIE_TOLERANCE_DEG = float(config.geometry.angle_tie_tolerance_deg)

    logger.debug("Applied project config to global constants")


def create_sample_config(path: Union[str, Path] = CONFIG_FILENAME) -> None:
    """Create a sample configuration file with documentation."""
    sample = {
        "_comment": "Hand posing configuration",
        "_version": "1.0",
        "geometry": {
            "_comment": "Thresholds for degenerate vectors and boundary ties",
            "epsilon": 1e-12,
            "angle_tie_tolerance_deg": 1e-6,
        },
        "logging": {
            "_comment": "Console and JSON log output",
            "level": "INFO",
            "json_file": None,
            "use_colors": True,
            "verbose": False,
        },
    }

    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(sample, f, indent=2, ensure_ascii=False)

    logger.info("Sample configuration created: %s", path)
