"""
Configuration management and loading.

Handles tracker settings read from an optional YAML file.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

import yaml

from fuel_tracker.storage.db import DEFAULT_DB_PATH
from fuel_tracker.storage.repository import DEFAULT_STORAGE_KEY

DEFAULT_TANK_CAPACITY = 5.0


@dataclass(frozen=True)
class StorageConfig:
    """Location of the persisted fuel log."""
    db_path: str = DEFAULT_DB_PATH
    key: str = DEFAULT_STORAGE_KEY
    
    def __post_init__(self):
        """Validate storage values are non-empty."""
        if not self.db_path:
            raise ValueError("db_path cannot be empty")
        if not self.key:
            raise ValueError("key cannot be empty")


@dataclass(frozen=True)
class TrackerConfig:
    """Complete tracker configuration."""
    tank_capacity: float = DEFAULT_TANK_CAPACITY
    storage: StorageConfig = field(default_factory=StorageConfig)
    
    def __post_init__(self):
        """Validate tank capacity is positive."""
        if self.tank_capacity <= 0:
            raise ValueError("tank_capacity must be > 0")


def load_tracker_config(path: str) -> TrackerConfig:
    """Load and validate tracker configuration from YAML file.
    
    Every key is optional; omitted keys keep their defaults. Unknown keys
    are rejected so typos are not silently ignored.
    
    Args:
        path: Path to YAML configuration file
        
    Returns:
        Validated TrackerConfig object
        
    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Tracker config file not found: {path}")
    
    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")
    
    if raw_config is None:
        return TrackerConfig()
    
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")
    
    allowed_top_keys = {'tank_capacity', 'storage'}
    unknown_keys = set(raw_config.keys()) - allowed_top_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")
    
    tank_capacity = raw_config.get('tank_capacity', DEFAULT_TANK_CAPACITY)
    if isinstance(tank_capacity, bool) or not isinstance(tank_capacity, (int, float)):
        raise ValueError("'tank_capacity' must be a number")
    if tank_capacity <= 0:
        raise ValueError("'tank_capacity' must be > 0")
    
    storage_data = raw_config.get('storage', {})
    if storage_data is None:
        storage_data = {}
    if not isinstance(storage_data, dict):
        raise ValueError("'storage' must be a dictionary")
    
    return TrackerConfig(
        tank_capacity=float(tank_capacity),
        storage=_parse_storage_config(storage_data, "storage")
    )


def _parse_storage_config(data: Dict, path: str) -> StorageConfig:
    """Parse and validate storage configuration.
    
    Args:
        data: Storage configuration data
        path: Path for error messages
        
    Returns:
        Validated StorageConfig
        
    Raises:
        ValueError: If configuration is invalid
    """
    allowed_keys = {'db_path', 'key'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")
    
    values = {}
    for name in ('db_path', 'key'):
        if name not in data:
            continue
        value = data[name]
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"'{name}' in {path} must be a non-empty string")
        values[name] = value
    
    return StorageConfig(**values)
