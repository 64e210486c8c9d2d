"""A1-notation helpers for addressing sheet cells by column letter."""


def column_letter(column_number: int) -> str:
    """Convert a 1-based column number to its letter label (1 -> A, 27 -> AA)."""
    if column_number < 1:
        raise ValueError(f"column number must be >= 1, got {column_number}")

    letters = ""
    while column_number > 0:
        column_number, remainder = divmod(column_number - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def cell_range(sheet_name: str, column_number: int, row: int) -> str:
    """Build a single-cell range such as ``Sheet1!H7``."""
    return f"{sheet_name}!{column_letter(column_number)}{row}"
