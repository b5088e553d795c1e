"""
Trade data models and normalization from raw provider records.
"""
