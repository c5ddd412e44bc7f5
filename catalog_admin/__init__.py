"""Catalog admin API.

Product, category and hero-slide administration backend.
"""

__version__ = "0.1.0"
