"""
API module for PierWatch.

Provides REST endpoints for:
- Filtered flight data
- Pier, aircraft and hourly statistics
- Response cache status
"""

from pierwatch.api.flights import flights_bp
from pierwatch.api.metrics import metrics_bp

__all__ = ['flights_bp', 'metrics_bp']
