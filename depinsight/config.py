"""Runtime configuration read from the environment.

Values come from process environment variables, after ``.env`` has been
loaded by ``depinsight/__init__.py``:

    DEPINSIGHT_NPM            npm executable (default: npm)
    DEPINSIGHT_GITHUB_TOKEN   token for the GitHub API (optional)
    DEPINSIGHT_HTTP_TIMEOUT   request timeout in seconds (default: 10)
    DEPINSIGHT_RATE_LIMIT     max health requests per period (default: 10)
    DEPINSIGHT_RATE_PERIOD    rate limit window in seconds (default: 1)
"""

import os

from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Resolved configuration for one invocation."""

    npm_executable: str = Field(default="npm", description="npm binary to invoke")
    github_token: str | None = Field(default=None, description="GitHub API token")
    http_timeout: float = Field(default=10.0, gt=0, description="HTTP timeout in seconds")
    rate_limit: int = Field(default=10, ge=1, description="Requests allowed per period")
    rate_period: float = Field(default=1.0, gt=0, description="Rate limit window in seconds")

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from DEPINSIGHT_* environment variables."""
        values: dict[str, object] = {}
        if npm := os.getenv("DEPINSIGHT_NPM"):
            values["npm_executable"] = npm
        if token := os.getenv("DEPINSIGHT_GITHUB_TOKEN"):
            values["github_token"] = token
        if timeout := os.getenv("DEPINSIGHT_HTTP_TIMEOUT"):
            values["http_timeout"] = timeout
        if limit := os.getenv("DEPINSIGHT_RATE_LIMIT"):
            values["rate_limit"] = limit
        if period := os.getenv("DEPINSIGHT_RATE_PERIOD"):
            values["rate_period"] = period
        return cls.model_validate(values)
