# SitemapLens — Logging configuration (stdout + optional rotating file)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import logging.handlers
import os
from typing import Optional

from .config import settings


FORMAT = "%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"


def configure_logging(level: Optional[str] = None, log_dir: Optional[str] = None, name: str = "sitemaplens") -> logging.Logger:
	"""Attach handlers to the `sitemaplens` logger for applications that want them.

	The library itself never calls this. `level` defaults to settings.log_level.
	The format is single-line and tab separated. With `log_dir`, a rotating
	sitemaplens.log is written there too.
	"""
	logger = logging.getLogger(name)
	level = level or settings.log_level
	logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

	# Clear existing handlers in case of re-init
	for h in list(logger.handlers):
		logger.removeHandler(h)
		h.close()

	stream = logging.StreamHandler()
	stream.setFormatter(logging.Formatter(FORMAT))
	logger.addHandler(stream)

	if log_dir:
		os.makedirs(log_dir, exist_ok=True)
		file_handler = logging.handlers.RotatingFileHandler(
			os.path.join(log_dir, "sitemaplens.log"), maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
		)
		file_handler.setFormatter(logging.Formatter(FORMAT))
		logger.addHandler(file_handler)
	return logger
