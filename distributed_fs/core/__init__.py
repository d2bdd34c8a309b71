"""
Core cluster model: configuration, errors, node registry and replication manager.
"""
