"""
Route risk scoring and hard exclusion.
"""

from .risk_model import RiskModel, RiskBreakdown, score_route, falloff, recency
from .exclusion_filter import ExclusionFilter

__all__ = ['RiskModel', 'RiskBreakdown', 'score_route', 'falloff', 'recency', 'ExclusionFilter']
