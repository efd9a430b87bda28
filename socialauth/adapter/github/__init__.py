"""GitHub OAuth adapter."""

from .client import GitHubAdapter, MockGitHubAdapter, RealGitHubAdapter

__all__ = ["GitHubAdapter", "RealGitHubAdapter", "MockGitHubAdapter"]
