"""Gitea Migration Tool

Copies repositories, with their branches and tags, from a GitHub (or Gitea)
account to a Gitea instance using local clones as the transport.
"""

__version__ = '0.1.0'

from .cli import main

__all__ = ['main']
