"""
Domain Layer

Pure playback rules: state machine, session aggregate, fade curve and
domain events. No I/O happens here.
"""
