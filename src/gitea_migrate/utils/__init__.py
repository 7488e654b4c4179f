"""Shared utilities."""

from .logging import setup_logging, mask_url, mask_credentials

__all__ = ['setup_logging', 'mask_url', 'mask_credentials']
