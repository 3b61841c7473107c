"""Input parsing utilities for CLI commands."""


def parse_assignment(spec: str) -> tuple[str, str]:
    """Parse a ``KEY=VALUE`` argument.

    Only the first ``=`` separates key from value, so values may contain ``=``.

    Examples:
        "Name=Khalid" → ("Name", "Khalid")
        "Expr=a=b" → ("Expr", "a=b")

    Raises:
        ValueError: If there is no ``=`` or the key is empty
    """
    key, sep, value = spec.partition("=")
    if not sep:
        raise ValueError(f"Invalid value spec: '{spec}'. Expected format: KEY=VALUE")
    if not key:
        raise ValueError(f"Invalid value spec: '{spec}'. Key must not be empty")
    return key, value


def parse_assignments(specs: list[str]) -> list[tuple[str, str]]:
    """Parse several ``KEY=VALUE`` arguments, keeping their order."""
    return [parse_assignment(spec) for spec in specs]
