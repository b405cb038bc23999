"""
Finance Tracker - Source Package

A personal finance tracker: income, expenses, assets, liabilities and
investments across USD and HKD, with dashboard and analytics reports.

DESIGN PRINCIPLES:
1. Aggregation is pure and works on immutable snapshots
2. Records are validated at the boundary, never corrected silently
3. Reads never fail; bad or missing data falls back to defaults, visibly
4. Every change is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
