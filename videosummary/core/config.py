from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


DEFAULT_BASE_URL = "https://api.videosummary.io"


def _optional_int(name: str) -> Optional[int]:
	raw = os.getenv(name, "").strip()
	return int(raw) if raw else None


class ClientSettings(BaseModel):
	# defaults come from the environment and go through the same validators
	model_config = ConfigDict(validate_default=True)

	environment: str = Field(default_factory=lambda: os.getenv("ENVIRONMENT", "production"))
	log_level: str = Field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

	# Service
	api_key: str = Field(default_factory=lambda: os.getenv("VIDEOSUMMARY_API_KEY", ""))
	base_url: str = Field(default_factory=lambda: os.getenv("VIDEOSUMMARY_BASE_URL", DEFAULT_BASE_URL))

	# Polling; max_poll_attempts=None polls until a terminal state
	poll_interval_seconds: float = Field(default_factory=lambda: float(os.getenv("VIDEOSUMMARY_POLL_INTERVAL_SECONDS", "3")))
	max_poll_attempts: Optional[int] = Field(default_factory=lambda: _optional_int("VIDEOSUMMARY_MAX_POLL_ATTEMPTS"))

	# Transport
	request_timeout_seconds: float = Field(default_factory=lambda: float(os.getenv("VIDEOSUMMARY_REQUEST_TIMEOUT_SECONDS", "30")))
	upload_timeout_seconds: float = Field(default_factory=lambda: float(os.getenv("VIDEOSUMMARY_UPLOAD_TIMEOUT_SECONDS", "600")))
	upload_chunk_size: int = Field(default_factory=lambda: int(os.getenv("VIDEOSUMMARY_UPLOAD_CHUNK_SIZE", str(1024 * 1024))))

	@field_validator("base_url")
	@classmethod
	def _strip_trailing_slash(cls, value: str) -> str:
		return value.rstrip("/")

	@field_validator("poll_interval_seconds")
	@classmethod
	def _non_negative_interval(cls, value: float) -> float:
		if value < 0:
			raise ValueError("poll_interval_seconds must be >= 0")
		return value

	@field_validator("max_poll_attempts")
	@classmethod
	def _positive_attempts(cls, value: Optional[int]) -> Optional[int]:
		if value is not None and value < 1:
			raise ValueError("max_poll_attempts must be >= 1")
		return value

	@field_validator("upload_chunk_size")
	@classmethod
	def _positive_chunk(cls, value: int) -> int:
		if value < 1:
			raise ValueError("upload_chunk_size must be >= 1")
		return value


_cached_settings: Optional[ClientSettings] = None


def load_settings(dotenv_path: Optional[str | Path] = None) -> ClientSettings:
	"""
	Load environment variables and return validated settings with sensible defaults.

	Precedence: passed dotenv_path (if provided) → .env in CWD (if exists) → OS env.
	"""
	global _cached_settings
	# In test environment, always reload settings to honor env overrides set by tests
	if os.getenv("ENVIRONMENT", "").lower() != "test":
		if _cached_settings is not None:
			return _cached_settings

	if dotenv_path is not None:
		load_dotenv(dotenv_path)
	else:
		default_env = Path(".env")
		if default_env.exists():
			load_dotenv(default_env)

	try:
		settings = ClientSettings()
	except (ValidationError, ValueError) as e:
		raise RuntimeError(f"Invalid configuration: {e}")
	if settings.environment.lower() != "test":
		_cached_settings = settings
	return settings


def get_settings() -> ClientSettings:
	return load_settings()
