import logging

from balancebeam import logger as logger_module
from balancebeam.config import COLOR_THEMES, default_color_theme, theme_name_for


def test_default_theme_is_a_fresh_copy():
    colors = default_color_theme()
    colors[0] = '#000000'
    assert COLOR_THEMES['Default'][0] != '#000000'


def test_theme_name_lookup():
    assert theme_name_for(COLOR_THEMES['Sunset']) == 'Sunset'
    assert theme_name_for(['#123456']) is None


def test_get_logger_stays_in_package_hierarchy():
    assert logger_module.get_logger('dashboard').name == 'balancebeam.dashboard'
    assert logger_module.get_logger('balancebeam.export').name == 'balancebeam.export'


def test_configure_logging_installs_handlers_once(tmp_path, monkeypatch):
    package_logger = logging.getLogger('balancebeam')
    monkeypatch.setattr(logger_module, '_configured', False)
    monkeypatch.setattr(package_logger, 'handlers', [])
    monkeypatch.setattr(package_logger, 'level', package_logger.level)

    logger_module.configure_logging('debug', log_dir=tmp_path)
    logger_module.configure_logging('info', log_dir=tmp_path)

    assert len(package_logger.handlers) == 2
    assert package_logger.level == logging.INFO
    assert (tmp_path / 'balancebeam.log').exists()
    for handler in package_logger.handlers:
        handler.close()
