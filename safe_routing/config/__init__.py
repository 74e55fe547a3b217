"""
Configuration management for safety-aware routing.
"""

from .routing_config import RoutingConfig, DEFAULT_OSRM_URL

__all__ = [
    'RoutingConfig',
    'DEFAULT_OSRM_URL'
]
