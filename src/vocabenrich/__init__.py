"""
vocab-enrich: enrich ranked vocabulary lists with dictionary lookups.
"""

__version__ = "0.1.0"
