"""Splits an interactive shell line into arguments."""

QUOTE_CHARS = ("'", '"')


def tokenize(line: str) -> list[str]:
    """
    Splits a line on spaces, keeping quoted runs together.

    A run opened with ' or " is closed by the same quote character; the other
    quote character is kept literally inside it. Quotes themselves are dropped,
    an unterminated quote runs to the end of the line. There are no escape sequences.

    Example:
        tokenize('doc-types create Inv "Invoice Document"')
        -> ['doc-types', 'create', 'Inv', 'Invoice Document']
    """
    args: list[str] = []
    current: list[str] = []
    quote_char: str | None = None
    # a quoted empty string ("") is still an argument
    has_token = False

    for char in line:
        if char in QUOTE_CHARS:
            if quote_char is None:
                quote_char = char
                has_token = True
            elif char == quote_char:
                quote_char = None
            else:
                current.append(char)
        elif char == " " and quote_char is None:
            if has_token:
                args.append("".join(current))
                current = []
                has_token = False
        else:
            current.append(char)
            has_token = True

    if has_token:
        args.append("".join(current))
    return args
