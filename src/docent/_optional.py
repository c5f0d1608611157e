# src/docent/_optional.py
"""Helpers for optional dependency handling."""

from typing import Any


def _create_missing_dependency_class(class_name: str, extra: str) -> type:
    """Create a placeholder class that raises ImportError on instantiation.

    The placeholder can be imported and used in type hints; constructing it
    tells the user which extra to install.

    Args:
        class_name: Name of the class being replaced
        extra: Name of the docent-rag extra that provides the dependency

    Returns:
        A class that raises ImportError on __init__
    """

    class MissingDependencyClass:
        def __init__(self, *args: Any, **kwargs: Any) -> None:
            raise ImportError(
                f"{class_name} requires the '{extra}' extra. "
                f"Install it with: pip install docent-rag[{extra}]"
            )

    MissingDependencyClass.__name__ = class_name
    MissingDependencyClass.__qualname__ = class_name
    MissingDependencyClass.__module__ = "docent"

    return MissingDependencyClass
