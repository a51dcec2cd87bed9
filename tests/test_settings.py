"""
Tests for settings loading
"""
import os

import pytest
import yaml

from kanbanchan.exceptions import ConfigurationException
from kanbanchan.settings import build_settings, load_settings, verify_settings


class TestBuildSettings:

    def test_collections_normalized_to_strings(self, settings):
        assert settings.steam.collections.finished == ('367520',)
        assert settings.steam.collections.up_next == ('413150', '1145360')

    def test_defaults_merged(self, settings):
        assert settings.sync.page_size == 100
        assert settings.sync.dry_run is False
        assert settings.sync.max_workers == 2

    def test_environment_overrides(self, raw_settings):
        env = {'STEAM_API_KEY': 'env-key', 'NOTION_TOKEN': 'env-token', 'STEAM_USER_ID': '42'}
        settings = build_settings(raw_settings, environ=env)
        assert settings.steam.api_key == 'env-key'
        assert settings.steam.user_id == '42'
        assert settings.notion.auth_token == 'env-token'

    @pytest.mark.parametrize('environment,expected', [
        ('', 'game-db-id'),
        ('production', 'game-db-id'),
        ('development', 'test-game-db-id'),
        ('LOCAL', 'test-game-db-id'),
    ])
    def test_game_database_id(self, raw_settings, environment, expected):
        settings = build_settings(raw_settings, environ={'ENVIRONMENT': environment})
        assert settings.game_database_id == expected

    def test_invalid_numbers_fall_back(self, raw_settings):
        raw_settings['sync'] = {'max_workers': 'many', 'timeout': -1, 'page_size': 500}
        settings = build_settings(raw_settings, environ={})
        assert settings.sync.max_workers == 4
        assert settings.sync.timeout == 10
        assert settings.sync.page_size == 100

    def test_verify_reports_missing_credentials(self):
        success, errors = verify_settings(build_settings({}, environ={}))
        assert success is False
        assert {e['path'] for e in errors} == {'steam/id', 'steam/key', 'notion/auth_token', 'notion/game_db'}


class TestLoadSettings:

    def test_loads_yaml(self, tmp_path, raw_settings):
        path = tmp_path / 'settings.yaml'
        path.write_text(yaml.safe_dump(raw_settings))

        settings = load_settings(str(path), environ={})

        assert settings.notion.game_db == 'game-db-id'
        assert settings.steam.collections.playing == ('1145360',)

    def test_path_from_environment(self, tmp_path, raw_settings):
        path = tmp_path / 'custom.yaml'
        path.write_text(yaml.safe_dump(raw_settings))
        settings = load_settings(environ={'KANBANCHAN_CONFIG': str(path)})
        assert settings.steam.user_id == '76561190000000001'

    def test_missing_file_writes_template(self, tmp_path):
        path = tmp_path / 'config' / 'settings.yaml'

        with pytest.raises(ConfigurationException):
            load_settings(str(path), environ={})

        assert os.path.exists(path)
        template = yaml.safe_load(path.read_text())
        assert set(template) == {'steam', 'notion', 'sync'}

    def test_incomplete_file(self, tmp_path):
        path = tmp_path / 'settings.yaml'
        path.write_text(yaml.safe_dump({'steam': {'id': '1'}}))
        with pytest.raises(ConfigurationException) as excinfo:
            load_settings(str(path), environ={})
        assert 'steam/key' in excinfo.value.message

    def test_empty_section_uses_defaults(self, tmp_path):
        path = tmp_path / 'settings.yaml'
        path.write_text('steam:\nnotion:\n  auth_token: t\n  game_db: db\nsync:\n')
        with pytest.raises(ConfigurationException) as excinfo:
            load_settings(str(path), environ={'STEAM_USER_ID': '1'})
        assert 'steam/key' in excinfo.value.message

        settings = load_settings(str(path), environ={'STEAM_USER_ID': '1', 'STEAM_API_KEY': 'k'})
        assert settings.sync.max_workers == 4
        assert settings.steam.collections.finished == ()

    def test_section_must_be_mapping(self, tmp_path):
        path = tmp_path / 'settings.yaml'
        path.write_text('steam: [1, 2]\n')
        with pytest.raises(ConfigurationException) as excinfo:
            load_settings(str(path), environ={})
        assert 'steam' in excinfo.value.message

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / 'settings.yaml'
        path.write_text('steam: [unclosed')
        with pytest.raises(ConfigurationException):
            load_settings(str(path), environ={})
