"""CSV decoding and parsing.

The format is deliberately minimal: newline-separated lines, comma-separated
fields, no quoting or escaping.
"""

BYTE_ORDER_MARK = "\ufeff"


def decode_content(content: bytes) -> str:
    """Convert raw blob bytes to text.

    Malformed UTF-8 sequences become replacement characters rather than
    failing the invocation.

    Args:
        content: Raw blob payload

    Returns:
        Decoded text with any leading byte-order-mark removed
    """
    text = content.decode("utf-8", errors="replace")
    return strip_bom(text)


def strip_bom(text: str) -> str:
    """Remove a single leading byte-order-mark if present."""
    return text[1:] if text.startswith(BYTE_ORDER_MARK) else text


def _split_fields(line: str) -> list[str]:
    fields = line.replace("\r", "").split(",")
    # Trailing empty fields do not count ("Bob," has one field)
    while len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return fields


def parse_csv(text: str) -> list[list[str]]:
    """Split decoded text into rows of fields.

    The first row is treated as a header and dropped only when it has more
    than one field; a single-field first row is kept as data.

    Args:
        text: Decoded CSV content

    Returns:
        One list of fields per source line, header excluded
    """
    lines = text.split("\n")
    while lines and lines[-1] == "":
        lines.pop()

    rows = [_split_fields(line) for line in lines]

    if rows and len(rows[0]) > 1:
        rows.pop(0)

    return rows
