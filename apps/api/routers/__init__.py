"""Routers package."""

from . import (
    health,
    auth,
    ai,
    user,
    admin,
)
