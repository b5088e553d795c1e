"""
Service configuration: defaults, layered loading and validation.
"""
