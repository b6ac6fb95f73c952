"""Views - entities presented as a specific version."""

from decor.views.context import Context, Deferred
from decor.views.view import View, present

__all__ = [
    "Context",
    "Deferred",
    "View",
    "present",
]
