"""Image Store Sync.

Keeps an image blob store and its metadata catalog usable despite drift:
an on-demand consistency audit and an at-least-once upload notification relay.
"""

__version__ = "0.1.0"
