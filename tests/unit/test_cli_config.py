"""
Unit tests for CLI configuration loading and output formatting.
"""

import json
import os

import pytest
import yaml

from cli.config import DEFAULT_CONFIG, ConfigurationManager
from cli.output import OutputFormatter, collapse_ids, format_coin_amount


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep real config files and ISSUANCE_* variables out of the tests."""
    monkeypatch.setattr('cli.config.CONFIG_SEARCH_PATHS', [tmp_path / '.issuance.yml'])
    for key in list(os.environ):
        if key.startswith('ISSUANCE_'):
            monkeypatch.delenv(key)


class TestConfigurationManager:

    def test_defaults(self):
        manager = ConfigurationManager()

        assert manager.get('ledger.default_max_supply') == 10000
        assert manager.get('ledger.default_price') == 50_000_000_000_000_000
        assert manager.get('cli.output_format') == 'table'
        assert manager.get_sources() == ['defaults']
        assert manager.validate() == []

    def test_missing_key_returns_default(self):
        assert ConfigurationManager().get('ledger.nope', 'fallback') == 'fallback'

    def test_profile(self):
        manager = ConfigurationManager(profile='development')

        assert manager.get('ledger.default_price') == 0
        assert manager.get('logging.level') == 'DEBUG'
        assert 'profile:development' in manager.get_sources()

    def test_unknown_profile(self):
        with pytest.raises(ValueError):
            ConfigurationManager(profile='staging').load()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / 'custom.yml'
        path.write_text(yaml.safe_dump({'ledger': {'default_max_supply': 42}}))

        manager = ConfigurationManager(config_file=str(path))

        assert manager.get('ledger.default_max_supply') == 42
        assert manager.get('storage.backup_count') == DEFAULT_CONFIG['storage']['backup_count']

    def test_json_file(self, tmp_path):
        path = tmp_path / 'custom.json'
        path.write_text(json.dumps({'cli': {'output_format': 'json'}}))

        assert ConfigurationManager(config_file=str(path)).get('cli.output_format') == 'json'

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigurationManager(config_file=str(tmp_path / 'absent.yml')).load()

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / 'custom.yml'
        path.write_text(yaml.safe_dump({'storage': {'backup_count': 3}}))
        monkeypatch.setenv('ISSUANCE_STORAGE__BACKUP_COUNT', '9')
        monkeypatch.setenv('ISSUANCE_CLI__COLOR_OUTPUT', 'false')

        manager = ConfigurationManager(config_file=str(path))

        assert manager.get('storage.backup_count') == 9
        assert manager.get('cli.color_output') is False
        assert manager.get_sources()[-1] == 'environment'

    def test_validation_errors(self, monkeypatch):
        monkeypatch.setenv('ISSUANCE_CLI__OUTPUT_FORMAT', 'xml')
        monkeypatch.setenv('ISSUANCE_LEDGER__DEFAULT_MAX_SUPPLY', '0')

        errors = ConfigurationManager().validate()

        assert any('output format' in e for e in errors)
        assert any('default_max_supply' in e for e in errors)

    def test_event_retention_setting(self, monkeypatch):
        assert ConfigurationManager().get('storage.max_events') == 10000

        monkeypatch.setenv('ISSUANCE_STORAGE__MAX_EVENTS', '0')
        errors = ConfigurationManager().validate()

        assert any('max_events' in e for e in errors)

    def test_set_and_save(self, tmp_path):
        manager = ConfigurationManager()
        manager.set('cli.output_format', 'yaml')
        path = manager.save(str(tmp_path / 'saved.yml'))

        assert yaml.safe_load(path.read_text())['cli']['output_format'] == 'yaml'

    def test_paths_are_expanded(self):
        data_dir = ConfigurationManager().get('ledger.data_dir')

        assert '~' not in data_dir


class TestOutputFormatter:

    def test_json(self):
        output = OutputFormatter('json').format({'token_ids': [1, 2]})

        assert json.loads(output) == {'token_ids': [1, 2]}

    def test_yaml(self):
        output = OutputFormatter('yaml').format({'paused': True, 'owner': None})

        assert yaml.safe_load(output) == {'paused': True, 'owner': None}

    def test_dict_table(self):
        output = OutputFormatter('table', color_output=False).format({'owner': 'alice', 'paused': False})

        assert 'alice' in output
        assert 'no' in output.split()

    def test_list_table_with_headers(self):
        rows = [{'account': 'carol', 'extra': 1}, {'account': 'dave', 'extra': 2}]
        output = OutputFormatter('table', color_output=False).format(rows, ['account'])

        assert 'carol' in output and 'dave' in output
        assert 'extra' not in output

    def test_empty_list(self):
        assert OutputFormatter('table').format([]) == "No data available"

    def test_amounts_show_coin_value(self):
        output = OutputFormatter('table', color_output=False).format({'price': 50_000_000_000_000_000})

        assert '50000000000000000 (0.05)' in output

    def test_token_ids_are_collapsed(self):
        output = OutputFormatter('table', color_output=False).format({'token_ids': [1, 2, 3, 7]})

        assert '1-3, 7' in output


class TestOutputHelpers:

    @pytest.mark.parametrize("ids,expected", [
        ([], '-'),
        ([5], '5'),
        ([1, 2, 3], '1-3'),
        ([1, 3, 4, 9], '1, 3-4, 9'),
    ])
    def test_collapse_ids(self, ids, expected):
        assert collapse_ids(ids) == expected

    @pytest.mark.parametrize("amount,expected", [
        (0, '0 (0)'),
        (10 ** 18, '1000000000000000000 (1)'),
        (150_000_000_000_000_000, '150000000000000000 (0.15)'),
        (100 * 10 ** 18, '100000000000000000000 (100)'),
    ])
    def test_format_coin_amount(self, amount, expected):
        assert format_coin_amount(amount) == expected
