"""Configuration module for the Cognito admin API."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
