import logging
import re

from expense_tracker import config
from expense_tracker.ids import generate_id


def test_configure_logging_adds_single_handler():
    logger = config.configure_logging('DEBUG')
    handlers = list(logger.handlers)
    assert logger.level == logging.DEBUG
    assert config.configure_logging('INFO').handlers == handlers
    assert logger.level == logging.INFO


def test_env_helpers(monkeypatch):
    monkeypatch.setenv('EXPENSE_TRACKER_TEST_VALUE', '12.5')
    assert config._env_float('EXPENSE_TRACKER_TEST_VALUE', 1.0) == 12.5
    monkeypatch.setenv('EXPENSE_TRACKER_TEST_VALUE', 'oops')
    assert config._env_int('EXPENSE_TRACKER_TEST_VALUE', 7) == 7
    monkeypatch.setattr(config, 'TOP_N', 0)
    assert config.get_top_n() == 1


def test_generated_ids_are_unique():
    ids = {generate_id() for _ in range(500)}
    assert len(ids) == 500
    assert all(re.fullmatch(r'\d{13}[0-9a-z]{9}', value) for value in ids)
