"""
AI News backend: aggregated headlines with AI summaries.
"""

__version__ = "0.1.0"
