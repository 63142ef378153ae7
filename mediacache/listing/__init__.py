"""
Ranked article listings kept in Redis by the publishing pipeline: a list of the
most recent article ids and a sorted set scoring articles by popularity.
This package only reads them, a page at a time.
"""

from . import ranking, schemas, tokens
