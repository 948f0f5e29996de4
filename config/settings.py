import os
import yaml
from typing import Dict, Any, Optional

DEFAULT_CONTROLLER = '127.0.0.1:9090'
DEFAULT_DELAY_TEST_URL = 'http://www.gstatic.com/generate_204'


class Settings:
    """Configuration management for the clashtui dashboard."""

    def __init__(self, config_file: Optional[str] = None):
        self.config_file = config_file or os.getenv('CLASHTUI_CONFIG_FILE', 'config/config.yaml')
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file and environment variables."""
        config = {}

        # Load from YAML file if exists
        if os.path.exists(self.config_file):
            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f) or {}

        controller = config.get('controller', {}) or {}
        delay_test = config.get('delay_test', {}) or {}
        traffic = config.get('traffic', {}) or {}
        ui = config.get('ui', {}) or {}
        log = config.get('logging', {}) or {}

        # Override with environment variables
        config.update({
            'controller': {
                'address': os.getenv('CLASH_CONTROLLER', controller.get('address', DEFAULT_CONTROLLER)),
                'secret': os.getenv('CLASH_SECRET', controller.get('secret')) or None,
                'timeout': self._parse_optional_float(os.getenv('CLASH_TIMEOUT', controller.get('timeout'))),
                'verify_ssl': self._parse_bool(os.getenv('CLASH_VERIFY_SSL', controller.get('verify_ssl', True))),
            },
            'delay_test': {
                'url': delay_test.get('url', DEFAULT_DELAY_TEST_URL),
                'timeout_ms': int(delay_test.get('timeout_ms', 5000)),
            },
            'traffic': {
                'retry_interval': float(traffic.get('retry_interval', 3)),
                'connect_timeout': float(traffic.get('connect_timeout', 5)),
                'read_timeout': float(traffic.get('read_timeout', 30)),
            },
            'ui': {
                'poll_interval': float(ui.get('poll_interval', 0.1)),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', log.get('level', 'INFO')),
                'file': os.getenv('LOG_FILE', log.get('file', 'logs/clashtui.log')),
                'max_bytes': int(os.getenv('LOG_MAX_BYTES', log.get('max_bytes', 10485760))),
                'backup_count': int(os.getenv('LOG_BACKUP_COUNT', log.get('backup_count', 5))),
            },
        })

        return config

    def get_controller(self) -> Dict[str, Any]:
        """Get the controller connection settings."""
        return self.config.get('controller', {})

    def reload(self, config_file: str) -> None:
        """Re-read configuration from a different file."""
        self.config_file = config_file
        self.config = self._load_config()

    def _parse_bool(self, value: Any) -> bool:
        """Parse boolean value from various formats."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        if isinstance(value, (int, float)):
            return bool(value)
        return False

    def _parse_optional_float(self, value: Any) -> Optional[float]:
        """Parse an optional number; empty values mean 'not set'."""
        if value is None or value == '':
            return None
        return float(value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

# Global settings instance
settings = Settings()
