# Performance Chart - Main Package
"""
Performance Chart: normalized multi-ticker performance dashboard.

This package provides:
- Series Fetcher: monthly closes from the Yahoo chart API, rescaled to 100
- Series Aligner: outer join of the series by month
- Orchestrator: concurrent, failure-tolerant, superseding refreshes
- Web Dashboard: FastAPI pages, JSON API and matplotlib chart
"""

__version__ = "1.0.0"
