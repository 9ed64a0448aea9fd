"""
Core layer: domain models, interfaces and services of the upload pipeline.
"""
