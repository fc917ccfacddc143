"""
Resource definitions built on fetch_resource operations.
"""
from .applications import (
    Application,
    ApplicationResult,
    ApplicationOptions,
    ApplicationsResource,
)

__all__ = [
    "Application",
    "ApplicationResult",
    "ApplicationOptions",
    "ApplicationsResource",
]
