"""
Configuration management for safety-aware routing parameters.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple

from ..errors import InputError


DEFAULT_OSRM_URL = "https://router.project-osrm.org"


@dataclass
class RoutingConfig:
    """Configuration parameters for risk scoring, exclusion, ranking and hotspots."""

    # Risk Sampling
    sample_spacing_m: float = 25.0  # meters - spacing of risk samples along a route
    report_radius_m: float = 120.0  # meters - soft influence radius of a report
    news_radius_m: float = 220.0    # meters - soft influence radius of a news incident

    # Source Weights
    report_weight: float = 1.0   # single unverified report
    news_weight: float = 1.35    # news is treated as more authoritative
    report_half_life_h: float = 72.0
    news_half_life_h: float = 240.0

    # Hard Exclusion
    exclusion_sample_spacing_m: float = 12.0  # denser than risk sampling
    hard_report_radius_m: float = 120.0
    hard_news_radius_m: float = 200.0
    severe_severity_threshold: int = 4

    # Ranking
    time_weight: float = 1.0     # alpha - per second of duration
    risk_weight: float = 350.0   # beta - per risk index point
    route_palette: Tuple[str, ...] = field(default_factory=lambda: (
        '#2ECC71',  # green - best
        '#3498DB',  # blue
        '#F39C12',  # orange
        '#9B59B6',  # purple
        '#E74C3C',  # red
    ))

    # Hotspots
    hotspot_radius_m: float = 180.0
    hotspot_min_count: int = 3
    base_vis_radius_m: float = 60.0
    per_report_radius_m: float = 20.0
    max_vis_radius_m: float = 250.0

    # Routing Provider
    osrm_base_url: str = field(
        default_factory=lambda: os.getenv("SAFE_ROUTING_OSRM_URL", DEFAULT_OSRM_URL)
    )
    osrm_profile: str = 'foot'
    osrm_timeout_s: float = 10.0

    def validate(self) -> None:
        """Validate configuration parameters."""
        positive = {
            'sample_spacing_m': self.sample_spacing_m,
            'report_radius_m': self.report_radius_m,
            'news_radius_m': self.news_radius_m,
            'report_half_life_h': self.report_half_life_h,
            'news_half_life_h': self.news_half_life_h,
            'exclusion_sample_spacing_m': self.exclusion_sample_spacing_m,
            'hard_report_radius_m': self.hard_report_radius_m,
            'hard_news_radius_m': self.hard_news_radius_m,
            'hotspot_radius_m': self.hotspot_radius_m,
            'osrm_timeout_s': self.osrm_timeout_s,
        }
        for name, value in positive.items():
            if not value > 0:
                raise InputError(f"{name} must be positive")

        for name in ('report_weight', 'news_weight', 'time_weight', 'risk_weight',
                     'base_vis_radius_m', 'per_report_radius_m', 'max_vis_radius_m'):
            if getattr(self, name) < 0:
                raise InputError(f"{name} must not be negative")

        if not 1 <= self.severe_severity_threshold <= 4:
            raise InputError("severe_severity_threshold must be between 1 and 4")
        if self.hotspot_min_count < 1:
            raise InputError("hotspot_min_count must be at least 1")
        if not self.route_palette:
            raise InputError("route_palette must contain at least one color")

    @classmethod
    def create_balanced_config(cls) -> 'RoutingConfig':
        """Create balanced configuration (default)."""
        return cls()

    @classmethod
    def create_conservative_config(cls) -> 'RoutingConfig':
        """Create configuration that prioritizes safety over speed."""
        return cls(
            risk_weight=700.0,
            hard_report_radius_m=160.0,
            hard_news_radius_m=260.0,
            severe_severity_threshold=3,
            report_half_life_h=120.0
        )

    @classmethod
    def create_speed_focused_config(cls) -> 'RoutingConfig':
        """Create configuration that tolerates more exposure for shorter trips."""
        return cls(
            risk_weight=120.0,
            hard_report_radius_m=60.0,
            hard_news_radius_m=120.0
        )
