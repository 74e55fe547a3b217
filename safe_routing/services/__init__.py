"""
Orchestration services that own I/O around the pure algorithms.
"""

from .request_sequencer import RequestSequencer
from .safe_routing_service import SafeRoutingService, PlanResult

__all__ = ['RequestSequencer', 'SafeRoutingService', 'PlanResult']
