"""
Polyline resampling.
"""

from .line_sampler import resample

__all__ = ['resample']
