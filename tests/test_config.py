#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
ReadSpool v0.1.0

Tests for configuration loading, overrides and validation.

Author: ReadSpool Development Team
License: MIT - See LICENSE
"""

import pytest
import yaml

from readspool.config import (
    DEFAULT_CONFIG,
    ConfigParser,
    ConfigValidationError,
    load_config,
    resolve_gzipped,
    save_config_template,
    validate_config,
)


class TestLoadConfig:
    """Test YAML loading over defaults."""

    def test_defaults_without_file(self):
        config = load_config()

        assert config == DEFAULT_CONFIG
        assert config is not DEFAULT_CONFIG
        assert validate_config(config) == []

    def test_user_values_deep_merge(self, temp_output_dir):
        path = temp_output_dir / "config.yaml"
        path.write_text(yaml.dump({'parsing': {'strict': True},
                                   'output': {'logging': {'level': 'DEBUG'}}}))

        config = load_config(path)

        assert config['parsing']['strict'] is True
        assert config['output']['logging']['level'] == 'DEBUG'
        assert config['output']['format'] == 'auto'
        assert config['input']['encoding'] == 'utf-8'

    def test_defaults_not_mutated(self, temp_output_dir):
        config = load_config()
        config['output']['logging']['level'] = 'ERROR'

        assert DEFAULT_CONFIG['output']['logging']['level'] == 'INFO'

    def test_template_round_trip(self, temp_output_dir):
        path = temp_output_dir / "template.yaml"
        save_config_template(path)

        assert load_config(path) == DEFAULT_CONFIG


class TestValidateConfig:
    """Test configuration validation."""

    @pytest.mark.parametrize("section,key,value", [
        ('input', 'gzipped', 'maybe'),
        ('parsing', 'strict', 'yes'),
        ('annotations', 'backend', 'redis'),
        ('output', 'format', 'sam'),
        ('output', 'line_width', -1),
    ])
    def test_invalid_values(self, section, key, value):
        config = load_config()
        config[section][key] = value

        assert len(validate_config(config)) == 1

    def test_sqlite_backend_needs_existing_path(self, temp_output_dir):
        config = load_config()
        config['annotations']['backend'] = 'sqlite'
        assert validate_config(config)

        config['annotations']['path'] = str(temp_output_dir / "missing.db")
        assert validate_config(config)

    def test_invalid_log_level(self):
        config = load_config()
        config['output']['logging']['level'] = 'LOUD'

        assert validate_config(config) == ["Invalid output.logging.level: LOUD"]


class TestResolveGzipped:
    """Test the gzip setting resolution."""

    def test_auto_uses_suffix(self):
        assert resolve_gzipped('auto', 'reads.fq.gz') is True
        assert resolve_gzipped('auto', 'reads.fq') is False
        assert resolve_gzipped(None, 'reads.fa.gz') is True

    def test_explicit_setting_wins(self):
        assert resolve_gzipped(False, 'reads.fq.gz') is False
        assert resolve_gzipped(True, 'reads.fq') is True


class TestConfigParser:
    """Test ConfigParser behaviour."""

    def test_dotted_get(self):
        parser = ConfigParser()

        assert parser.get('input.encoding') == 'utf-8'
        assert parser.get('input.missing', 'fallback') == 'fallback'

    def test_env_substitution(self, temp_output_dir, monkeypatch):
        monkeypatch.setenv('READSPOOL_DB', '/data/ann.db')
        path = temp_output_dir / "config.yaml"
        path.write_text("annotations:\n"
                        "  path: ${READSPOOL_DB}\n"
                        "  table: ${READSPOOL_TABLE:-hits}\n")

        parser = ConfigParser(path)

        assert parser.get('annotations.path') == '/data/ann.db'
        assert parser.get('annotations.table') == 'hits'

    def test_cli_overrides_skip_none(self):
        parser = ConfigParser()
        parser.merge_cli_overrides({'parsing.strict': True, 'output.format': None})

        assert parser.get('parsing.strict') is True
        assert parser.get('output.format') == 'auto'

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            ConfigParser(temp_output_dir / "missing.yaml")

    def test_invalid_yaml(self, temp_output_dir):
        path = temp_output_dir / "bad.yaml"
        path.write_text("input: [unclosed\n")

        with pytest.raises(ConfigValidationError):
            ConfigParser(path)

    def test_validate_raises(self):
        parser = ConfigParser()
        parser.merge_cli_overrides({'output.format': 'bam'})

        with pytest.raises(ConfigValidationError):
            parser.validate()
