"""
Infrastructure layer: configuration, logging and the HTTP transport.
"""
