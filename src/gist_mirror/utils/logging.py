"""Logging utilities for Gist Mirror."""

import re
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

# user:token@ or bare token@ in URLs
_URL_CREDENTIALS = re.compile(r'(https?://)[^/@\s]+@')
_GITHUB_TOKENS = re.compile(r'\b(gh[pousr]_[A-Za-z0-9]{20,}|github_pat_[A-Za-z0-9_]{20,})')


def mask_secrets(text: str) -> str:
    """Hide credentials embedded in URLs and GitHub tokens.

    Args:
        text: Text that may contain secrets

    Returns:
        Text safe to log
    """
    text = _URL_CREDENTIALS.sub(r'\1***@', text)
    return _GITHUB_TOKENS.sub('***TOKEN***', text)


def _masking_filter(record) -> bool:
    record['message'] = mask_secrets(record['message'])
    return True


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """Setup logging configuration using loguru.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        log_format: Optional custom log format
    """
    logger.remove()

    if log_format is None:
        log_format = (
            '<green>{time:YYYY-MM-DD HH:mm:ss}</green> | '
            '<level>{level: <8}</level> | '
            '<cyan>{extra[component]}</cyan> | '
            '<level>{message}</level>'
        )

    # Records logged without bind(component=...) still need the key
    logger.configure(extra={'component': 'gist-mirror'})

    logger.add(
        sys.stderr,
        format=log_format,
        level=level,
        colorize=True,
        filter=_masking_filter,
        backtrace=False,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_format = (
            '{time:YYYY-MM-DD HH:mm:ss} | '
            '{level: <8} | '
            '{extra[component]} | '
            '{message}'
        )

        logger.add(
            log_file,
            format=file_format,
            level=level,
            rotation='10 MB',
            retention='30 days',
            compression='gz',
            filter=_masking_filter,
            backtrace=False,
            diagnose=False,
        )

    logger.debug(f'Logging initialized with level: {level}')
    if log_file:
        logger.info(f'Log file: {log_file}')
