"""Document sources for excerpt rendering."""

from code_excerpt.sources.github import GitHubSource

__all__ = ["GitHubSource"]
