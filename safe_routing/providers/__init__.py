"""
External routing provider adapters.
"""

from .osrm_provider import OSRMRoutingProvider

__all__ = ['OSRMRoutingProvider']
