"""Function types shared across the transformation engine.

A transform function takes a string and returns the transformed string,
raising on failure. A lookup function resolves a variable name to a
``(value, found)`` pair.
"""

from collections.abc import Callable

# Type alias for transformation steps
TransformFunc = Callable[[str], str]

# Type alias for variable sources
LookupFunc = Callable[[str], tuple[str, bool]]
