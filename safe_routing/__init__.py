"""
Safety-Aware Pedestrian Routing

Ranks pre-computed walking routes by a blend of travel time and exposure to
reported incidents, drops routes that cross hard no-go zones, and clusters
reports into hotspots.

## Quick Start

```python
from safe_routing import RouteRanker, RoutingConfig

ranker = RouteRanker(RoutingConfig.create_balanced_config())
result = ranker.rank(candidates, reports, news)

best = result.best
if result.all_excluded:
    ...  # warn the user: every option crosses a no-go zone
```

## Architecture

- `algorithms/`: Resampling, risk scoring, exclusion, ranking, clustering
- `data/`: Value types, loaders, report store, distance utilities
- `providers/`: Routing provider adapters (OSRM)
- `services/`: Orchestration and latest-request-wins sequencing
- `export/`: GeoJSON output for map clients
- `config/`: Configuration management
"""

from .algorithms import (
    resample,
    RiskModel,
    ExclusionFilter,
    RouteRanker,
    HotspotClusterer
)
from .config import RoutingConfig
from .data import (
    Coordinate,
    IncidentReport,
    NewsIncident,
    RouteCandidate,
    ScoredRoute,
    RankingResult,
    Cluster,
    Violation,
    ViolationReason,
    IncidentContext
)
from .errors import (
    SafeRoutingError,
    InputError,
    NoCandidatesError,
    ProviderUnavailableError,
    AllExcludedWarning
)
from .services import SafeRoutingService

# Version information
__version__ = "1.0.0"
__author__ = "Safe Routing Team"

__all__ = [
    # Main interfaces
    'RouteRanker',
    'SafeRoutingService',
    'RoutingConfig',

    # Core algorithms
    'resample',
    'RiskModel',
    'ExclusionFilter',
    'HotspotClusterer',

    # Data types
    'Coordinate',
    'IncidentReport',
    'NewsIncident',
    'RouteCandidate',
    'ScoredRoute',
    'RankingResult',
    'Cluster',
    'Violation',
    'ViolationReason',
    'IncidentContext',

    # Errors
    'SafeRoutingError',
    'InputError',
    'NoCandidatesError',
    'ProviderUnavailableError',
    'AllExcludedWarning',

    # Metadata
    '__version__',
    '__author__'
]
