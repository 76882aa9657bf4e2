"""Shared type aliases used across wren modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: receives (request, path_params) and returns a Response
Handler: TypeAlias = Callable[..., Any]
