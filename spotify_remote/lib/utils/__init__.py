"""
Utility functions package
"""
from .logger import setup_logger, setup_file_logger, configure_logging

__all__ = ['setup_logger', 'setup_file_logger', 'configure_logging']
