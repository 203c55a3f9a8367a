"""
Tests for identifier, timestamp, record and health-check utilities.
"""

import json
import logging
import sys
from datetime import timezone

import pytest

from think_workspace.utils.config import load_config
from think_workspace.utils.health_check import check_health, get_health_status, get_system_info
from think_workspace.utils.id_utils import generate_id, generate_unique_id, is_valid_session_id
from think_workspace.utils.json_utils import read_record, write_record
from think_workspace.utils.logging_config import _build_handlers
from think_workspace.utils.timestamp_utils import age_in_days, now_iso, parse_iso


class TestIdentifiers:

    def test_generate_id_format(self):
        value = generate_id('session', timestamp=1700000000.5)

        prefix, epoch_ms, suffix = value.split('_')
        assert prefix == 'session'
        assert epoch_ms == '1700000000500'
        assert len(suffix) == 5
        assert all(c in '0123456789abcdefghijklmnopqrstuvwxyz' for c in suffix)

    def test_generate_unique_id_rerolls(self):
        seen = []

        def exists(candidate):
            seen.append(candidate)
            return len(seen) < 3

        value = generate_unique_id('thought', exists)

        assert value == seen[-1]
        assert len(seen) == 3

    def test_generate_unique_id_gives_up(self):
        with pytest.raises(RuntimeError):
            generate_unique_id('thought', lambda candidate: True)

    @pytest.mark.parametrize('value,valid', [
        ('session_1700000000000_ab12c', True),
        ('my-notes.v2', True),
        ('', False),
        ('.hidden', False),
        ('../up', False),
        ('a/b', False),
        ('x' * 129, False),
    ])
    def test_session_id_validation(self, value, valid):
        assert is_valid_session_id(value) is valid


class TestTimestamps:

    def test_now_iso_round_trip(self):
        value = now_iso(1700000000.5)

        assert value == '2023-11-14T22:13:20.500Z'
        parsed = parse_iso(value)
        assert parsed.tzinfo == timezone.utc
        assert parsed.timestamp() == 1700000000.5

    def test_parse_naive_assumes_utc(self):
        assert parse_iso('2025-01-01T00:00:00').tzinfo == timezone.utc

    def test_age_in_days(self):
        assert age_in_days(0, now=86400 * 3) == 3


class TestRecords:

    def test_write_then_read(self, tmp_path):
        path = tmp_path / 'record.json'
        write_record(path, [{'content': 'ünïcode'}])

        assert read_record(path) == [{'content': 'ünïcode'}]
        assert json.loads(path.read_text(encoding='utf-8')) == [{'content': 'ünïcode'}]
        assert [p.name for p in tmp_path.iterdir()] == ['record.json']

    def test_read_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_record(tmp_path / 'missing.json')


class TestConfigAndHealth:

    def test_load_config_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv('THINK_SESSION_DIR', str(tmp_path))
        monkeypatch.setenv('THINK_RETENTION_MAX_AGE_DAYS', '30')

        loaded = load_config()

        assert loaded.storage.session_dir == str(tmp_path)
        assert loaded.retention.default_max_age_days == 30
        assert loaded.chain.visible_length == 7

    def test_health_of_temporary_storage(self, app_config):
        status = get_health_status(app_config)

        assert status['session_storage']['healthy'] is True
        assert status['session_storage']['session_count'] == 0
        assert check_health(app_config) is True

    def test_system_info(self, app_config):
        info = get_system_info(app_config)

        assert info['service_name'] == 'Think Workspace'
        assert info['configuration']['retention_days'] == 90
        assert 'session_storage' in info['health_status']


class TestLogging:

    def test_file_handler_added_when_configured(self, app_config, tmp_path):
        app_config.log_file = str(tmp_path / 'logs' / 'think.log')

        handlers = _build_handlers(app_config)
        try:
            assert len(handlers) == 2
            assert isinstance(handlers[1], logging.FileHandler)
            assert (tmp_path / 'logs').is_dir()
        finally:
            for handler in handlers[1:]:
                handler.close()

    def test_console_only_by_default(self, app_config):
        handlers = _build_handlers(app_config)

        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr
