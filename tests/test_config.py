"""
Unit tests for gitsemver.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

from gitsemver.config import (
    apply_env_overrides,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir}, clear=False)
        self.env.start()
        for key in [k for k in os.environ if k.startswith('GITSEMVER_')]:
            del os.environ[key]
        self.config_dir = Path(self.temp_dir) / '.gitsemver'

    def tearDown(self):
        """Clean up test environment"""
        self.env.stop()
        shutil.rmtree(self.temp_dir)
        logging.getLogger("gitsemver").setLevel(logging.INFO)

    def _write(self, name, content):
        self.config_dir.mkdir(exist_ok=True)
        path = self.config_dir / name
        path.write_text(content)
        return path

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        for section in ('sync', 'manifest', 'publish', 'log', 'logging'):
            self.assertIn(section, config)

        self.assertEqual(config['sync']['initial_tag'], '0.0.0')
        self.assertEqual(config['manifest']['type'], 'node')
        self.assertEqual(config['log']['hash_width'], 9)
        self.assertEqual(config['publish']['command'], '')

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config()
        self.assertEqual(config, get_default_config())

    def test_default_config_path(self):
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_json(self):
        self._write('config.json', json.dumps({'manifest': {'type': 'python'}}))

        config = load_config()

        self.assertEqual(config['manifest']['type'], 'python')
        # untouched keys keep their defaults
        self.assertEqual(config['manifest']['post_stamp_command'], '')
        self.assertEqual(config['sync']['initial_tag'], '0.0.0')

    def test_load_toml(self):
        self._write('config.toml', '[publish]\ncommand = "npm publish"\n')
        self.assertEqual(load_config()['publish']['command'], 'npm publish')

    def test_load_yaml(self):
        self._write('config.yaml', 'log:\n  hash_width: 12\n')
        self.assertEqual(load_config()['log']['hash_width'], 12)

    def test_explicit_config_path(self):
        path = Path(self.temp_dir) / 'custom.json'
        path.write_text(json.dumps({'sync': {'initial_tag': '1.0.0'}}))
        os.environ['GITSEMVER_CONFIG'] = str(path)

        self.assertEqual(get_config_path(), path)
        self.assertEqual(load_config()['sync']['initial_tag'], '1.0.0')

    def test_invalid_file_falls_back_to_defaults(self):
        self._write('config.json', '{not json')

        with self.assertLogs('gitsemver', level='ERROR'):
            config = load_config()

        self.assertEqual(config['manifest']['type'], 'node')

    def test_non_mapping_file_ignored(self):
        self._write('config.json', '[1, 2, 3]')
        self.assertEqual(load_config()['manifest']['type'], 'node')

    def test_logging_level_applied(self):
        self._write('config.json', json.dumps({'logging': {'level': 'warning'}}))
        load_config()
        self.assertEqual(logging.getLogger('gitsemver').level, logging.WARNING)


class TestEnvOverrides(unittest.TestCase):
    """Test GITSEMVER_* environment overrides"""

    def test_string_setting_stays_string(self):
        with patch.dict(os.environ, {'GITSEMVER_SYNC_INITIAL_TAG': '1.0.0'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['sync']['initial_tag'], '1.0.0')

    def test_numeric_setting_coerced(self):
        with patch.dict(os.environ, {'GITSEMVER_LOG_HASH_WIDTH': '12'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['log']['hash_width'], 12)

    def test_multi_word_key(self):
        with patch.dict(os.environ, {'GITSEMVER_MANIFEST_POST_STAMP_COMMAND': 'npm update'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['manifest']['post_stamp_command'], 'npm update')

    def test_unknown_keys_ignored(self):
        with patch.dict(os.environ, {'GITSEMVER_SYNC_BOGUS': 'x', 'GITSEMVER_NOPE_KEY': 'y'}):
            config = apply_env_overrides(get_default_config())
        self.assertNotIn('bogus', config['sync'])
        self.assertNotIn('nope', config)

    def test_config_path_variable_is_not_a_setting(self):
        with patch.dict(os.environ, {'GITSEMVER_CONFIG': '/tmp/x.json'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config, get_default_config())


class TestMergeConfigs(unittest.TestCase):

    def test_nested_merge(self):
        base = {'a': {'x': 1, 'y': 2}, 'b': 1}
        merged = merge_configs(base, {'a': {'y': 3}, 'c': 4})
        self.assertEqual(merged, {'a': {'x': 1, 'y': 3}, 'b': 1, 'c': 4})
        self.assertEqual(base['a']['y'], 2)

    def test_override_replaces_non_dict(self):
        self.assertEqual(merge_configs({'a': 1}, {'a': {'b': 2}}), {'a': {'b': 2}})


if __name__ == '__main__':
    unittest.main()
