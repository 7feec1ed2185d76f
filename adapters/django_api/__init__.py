"""
Crewdesk Django HTTP adapter.
Thin framework glue over the task rules dispatcher.
"""

from adapters.django_api.wiring import build_dependencies, reset_dependencies

__all__ = [
    "build_dependencies",
    "reset_dependencies",
]
