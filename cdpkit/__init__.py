"""Client-side state for Chrome DevTools Protocol sessions: frames, network, targets, listeners and layout helpers."""

__version__ = "0.3.5"