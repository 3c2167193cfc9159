"""
Version information for the Resume Optimizer.

This file is the single source of truth for version numbers.
The service reports it from / and /api/health.
"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
