"""File-based debug logging setup."""

from __future__ import annotations

import logging
from pathlib import Path


def setup_file_logging(log_dir: Path, level: int = logging.DEBUG) -> Path:
    """Attach a debug log file under *log_dir* to the ``llmhub`` logger tree."""
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / 'llmhub_debug.log'
    handler = logging.FileHandler(log_path, encoding='utf-8')
    handler.setFormatter(logging.Formatter('%(asctime)s %(levelname)s %(name)s %(message)s'))
    root = logging.getLogger('llmhub')
    root.setLevel(level)
    root.addHandler(handler)
    logging.getLogger('llmhub.controller').info('Debug logging started → %s', log_path)
    return log_path
