"""Path parameter converters.

A ``{name:type}`` segment only matches text accepted by the converter's
regex. Captured values are handed to handlers as strings.
"""

# Regex each converter's segment must match in full
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}
