"""
Configuration module for the vacation rental Gmail integration.
"""

from .settings import gmail_config, supabase_config, app_config

__all__ = ['gmail_config', 'supabase_config', 'app_config']
