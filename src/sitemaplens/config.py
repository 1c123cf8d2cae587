# SitemapLens — Configuration via Pydantic BaseSettings
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import os
from typing import Optional, Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
	"""Library defaults, overridable from the environment.

	Environment variables are prefixed with SITEMAPLENS_. FetchOptions
	arguments take precedence.
	"""

	model_config = SettingsConfigDict(env_prefix="SITEMAPLENS_", env_file=".env", extra="ignore")

	user_agent: str = Field(default="SitemapLens/0.1 (+https://example.com)")
	connect_timeout: float = Field(default=10.0)
	read_timeout: float = Field(default=30.0)
	# 0 means one worker per CPU
	max_parallelism: int = Field(default=0, ge=0)
	max_redirects: int = Field(default=10, ge=0)
	pool_maxsize: int = Field(default=32, ge=1)
	chunk_size: int = Field(default=64 * 1024, ge=1)
	log_level: str = Field(default="WARNING")

	@property
	def timeout(self) -> Tuple[float, float]:
		return self.connect_timeout, self.read_timeout

	def parallelism(self, override: Optional[int] = None) -> int:
		for value in (override, self.max_parallelism):
			if value is not None and value > 0:
				return value
		return os.cpu_count() or 1


settings = Settings()
