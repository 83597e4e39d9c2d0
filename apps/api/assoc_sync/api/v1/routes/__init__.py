"""Route package marker.

Keep this module import-light so worker code can import a single route module
without pulling in the whole app.
"""

__all__ = [
    "admin",
    "associations",
    "health",
]
