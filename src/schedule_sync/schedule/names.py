def schedule_name(display_name: str) -> str:
    """Convert a "First Last" display name to the schedule's "Last,First" row key.

    The schedule writes row labels with no space after the comma.

    Raises:
        ValueError: If the name is not exactly two space-separated words.
    """
    parts = display_name.lower().title().split()
    if len(parts) != 2:
        raise ValueError(
            f"Expected a 'First Last' name, got {display_name!r}"
        )
    first, last = parts
    return f"{last},{first}"
