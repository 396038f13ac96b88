"""
ReadSpool v0.1.0

Configuration schema for ReadSpool.

Defines all available configuration parameters with defaults and validation.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import copy
from typing import Dict, Any, Optional, List, Union
from pathlib import Path
import yaml

from ..io.line_source import is_gzipped


# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Input
    # ========================================================================
    'input': {
        'gzipped': 'auto',  # True, False, 'auto' (from file suffix)
        'encoding': 'utf-8',
    },

    # ========================================================================
    # Parsing
    # ========================================================================
    'parsing': {
        'strict': False,  # Reject malformed records instead of tolerating them
    },

    # ========================================================================
    # Annotation Store
    # ========================================================================
    'annotations': {
        'backend': 'none',  # 'none', 'sqlite'
        'path': None,
        'table': 'annotations',
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'format': 'auto',  # 'auto', 'fasta', 'fastq', 'tsv'
        'line_width': 0,  # FASTA wrap width (0 = no wrapping)

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}

VALID_OUTPUT_FORMATS = ['auto', 'fasta', 'fastq', 'tsv']
VALID_BACKENDS = ['none', 'sqlite']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            # Deep merge user config into defaults
            if user_config:
                config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path):
    """
    Save the default configuration to a YAML file.

    Args:
        output_path: Output file path
    """
    with open(output_path, 'w') as f:
        yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False, sort_keys=False)


def resolve_gzipped(setting: Union[bool, str, None], filepath: Union[str, Path]) -> bool:
    """
    Turn the input.gzipped setting into a boolean.

    Args:
        setting: True, False or 'auto'
        filepath: Reads file, consulted only for 'auto'

    Returns:
        Whether to gunzip the file
    """
    if setting is None or setting == 'auto':
        return is_gzipped(filepath)
    return bool(setting)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    gzipped = config.get('input', {}).get('gzipped', 'auto')
    if gzipped not in (True, False, 'auto'):
        errors.append(f"Invalid input.gzipped: {gzipped!r} (expected true, false or 'auto')")

    if not isinstance(config.get('parsing', {}).get('strict', False), bool):
        errors.append("parsing.strict must be a boolean")

    annotations = config.get('annotations', {})
    backend = annotations.get('backend', 'none')
    if backend not in VALID_BACKENDS:
        errors.append(f"Invalid annotations.backend: {backend}")
    elif backend == 'sqlite':
        db_path = annotations.get('path')
        if not db_path:
            errors.append("annotations.path is required for the sqlite backend")
        elif not Path(db_path).exists():
            errors.append(f"Annotation database not found: {db_path}")

    output = config.get('output', {})
    if output.get('format', 'auto') not in VALID_OUTPUT_FORMATS:
        errors.append(f"Invalid output.format: {output.get('format')}")

    line_width = output.get('line_width', 0)
    if not isinstance(line_width, int) or line_width < 0:
        errors.append(f"Invalid output.line_width: {line_width} (must be >= 0)")

    level = output.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid output.logging.level: {level}")

    return errors
