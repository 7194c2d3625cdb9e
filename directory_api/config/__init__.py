"""Configuration module for the directory API."""
from .settings import AppConfig, load_settings

__all__ = ["AppConfig", "load_settings"]
