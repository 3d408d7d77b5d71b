"""
stockfeeds: syndication feeds built from stock screener CSV output.
"""

__version__ = "1.0.0"
