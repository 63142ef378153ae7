"""
On-demand image derivatives for published articles, plus the ranked
article listings that reference them.
"""

__version__ = "0.1.0"
