
def format_position(pos):
    """Rounded position with thousands separators, e.g. 1,234,568."""
    return f"{int(round(pos)):,}"
