#!/usr/bin/env python3
"""
Tests for runtime logging configuration
"""
import logging

from spotify_remote.lib.utils.logger import configure_logging


def test_configure_logging_adds_one_file_handler(tmp_path):
    """Repeated configuration with the same log file keeps a single file handler"""
    log_file = tmp_path / 'logs' / 'remote.log'
    logger = logging.getLogger('test-remote')
    try:
        configure_logging('INFO', log_file=str(log_file), names=('test-remote',))
        configure_logging('DEBUG', log_file=str(log_file), names=('test-remote',))

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert logger.level == logging.DEBUG

        logger.info('written once')
        file_handlers[0].flush()
        assert log_file.read_text().count('written once') == 1
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
