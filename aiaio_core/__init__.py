"""
aiaio_core
==========

Administrative core for the personalized children's video platform:
database helpers, asset review, playlist maintenance, storage utilities
and the timing checks used when debugging rendered videos.
"""

__version__ = "0.1.0"
