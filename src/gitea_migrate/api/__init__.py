"""Hosting service API clients."""

from .client import APIClient, APIResponse
from .github import GitHubClient
from .gitea import GiteaClient

__all__ = ['APIClient', 'APIResponse', 'GitHubClient', 'GiteaClient']
