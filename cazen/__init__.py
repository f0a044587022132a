"""
CaZen - Wedding Planner

A calm wedding planner: checklist, budget, guest list and a dashboard
that sums it all up.

DESIGN PRINCIPLES:
1. Numbers on screen come only from stored rows
2. Aggregation is pure and lives apart from storage
3. Input is validated once, at the form
4. Every change is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "CaZen Team"
