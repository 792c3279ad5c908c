"""
Application services.

Composes the ingestion and analytics stages behind one entry point, with
graceful degradation when the flight feed is unavailable.
"""

from pierwatch.services.dashboard import DashboardService, PLACEHOLDER_PIER_STATS, placeholder_aggregates

__all__ = ['DashboardService', 'PLACEHOLDER_PIER_STATS', 'placeholder_aggregates']
