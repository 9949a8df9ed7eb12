"""
Coupang Insights - sales, product-master and inbound ingestion with
inventory depletion risk analytics.
"""

__version__ = "1.0.0"
