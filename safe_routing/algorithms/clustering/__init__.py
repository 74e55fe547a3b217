"""
Hotspot clustering of incident reports.
"""

from .hotspot_clusterer import HotspotClusterer

__all__ = ['HotspotClusterer']
