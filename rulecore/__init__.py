"""
rulecore

Rules-evaluation core for a trading-card game card catalog.
"""

__version__ = "0.1.0"
