from __future__ import annotations

import os
from functools import lru_cache
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, Field

Notation = Literal["compact", "spaced"]


class Settings(BaseModel):
	# Grammar text notation used when a caller does not say otherwise.
	notation: Notation = "compact"
	# Collect every conflict instead of stopping at the first one.
	all_conflicts: bool = False
	max_tokens: int = Field(default=10_000, gt=0)
	cors_origins: List[str] = Field(default_factory=lambda: ["*"])

	@classmethod
	def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
		env = os.environ if env is None else env
		values = {}
		if env.get("PARSELAB_NOTATION"):
			values["notation"] = env["PARSELAB_NOTATION"].strip().lower()
		if env.get("PARSELAB_ALL_CONFLICTS"):
			values["all_conflicts"] = env["PARSELAB_ALL_CONFLICTS"].strip().lower() in {"1", "true", "yes", "on"}
		if env.get("PARSELAB_MAX_TOKENS"):
			values["max_tokens"] = int(env["PARSELAB_MAX_TOKENS"])
		if env.get("PARSELAB_CORS_ORIGINS"):
			values["cors_origins"] = [o.strip() for o in env["PARSELAB_CORS_ORIGINS"].split(",") if o.strip()]
		return cls(**values)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
	return Settings.from_env()
