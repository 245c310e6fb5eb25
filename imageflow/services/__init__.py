"""
Service layer: logging and the transform pipeline.
"""
