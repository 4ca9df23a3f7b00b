"""Path parameter converters.

Built-in converters for route path segments like ``{id:int}``. The
router uses the patterns to validate values passed to ``generate_uri``.
"""

import re

# regex_pattern for each supported converter
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def compile_converter(param_type: str) -> re.Pattern[str]:
    """Anchored regex for *param_type*.

    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    return re.compile(f"^{CONVERTERS[param_type]}$")
