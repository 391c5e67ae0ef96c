"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Audio (ffprobe-backed headless media engine)
"""
