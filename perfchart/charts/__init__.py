# Performance Chart - Charts Package
"""
Chart rendering for the performance dashboard.

- Normalized multi-ticker line chart
- Flattened chart records for client-side plotting
"""

from .generator import PerformanceChartGenerator, chart_generator, to_chart_records

__all__ = ["PerformanceChartGenerator", "chart_generator", "to_chart_records"]
