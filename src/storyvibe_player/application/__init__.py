"""
Application Layer

Orchestrates the playback domain against the media engine port.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Playback controller, repeating task helper, player host
- queries/: Read models for the view layer
"""
