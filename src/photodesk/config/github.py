"""GitHub contents API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

GITHUB_API_URL = "https://api.github.com"
GITHUB_TIMEOUT_SECONDS = 20.0
DEFAULT_BRANCH = "main"


def default_github_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="github",
        base_url=GITHUB_API_URL,
        timeout_seconds=GITHUB_TIMEOUT_SECONDS,
        retry=RetryPolicy(),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        default_headers={
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        },
    )


@dataclass(frozen=True)
class GitHubConfig:
    """Repository coordinates and credential for the hosted gallery."""

    owner: str
    repo: str
    token: str = field(repr=False)
    branch: str = DEFAULT_BRANCH
    resilience: ResilienceConfig = field(default_factory=default_github_resilience)

    @property
    def contents_prefix(self) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents"


def get_github_config(*, resilience: ResilienceConfig | None = None) -> GitHubConfig:
    values = require_env_vars(("GITHUB_OWNER", "GITHUB_REPO", "GITHUB_TOKEN"))
    return GitHubConfig(
        owner=values["GITHUB_OWNER"],
        repo=values["GITHUB_REPO"],
        token=values["GITHUB_TOKEN"],
        branch=optional_env_var("GITHUB_BRANCH", DEFAULT_BRANCH),
        resilience=resilience or default_github_resilience(),
    )
