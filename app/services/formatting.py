_PERSIAN_DIGITS = str.maketrans("0123456789,", "۰۱۲۳۴۵۶۷۸۹٬")


def to_persian_digits(text: str) -> str:
    return text.translate(_PERSIAN_DIGITS)


def format_amount(amount: int, signed: bool = False) -> str:
    """Format an amount the fa-IR way: '۱٬۲۵۰٬۰۰۰'."""
    text = to_persian_digits(f"{abs(amount):,}")
    if amount < 0:
        return f"-{text}"
    if signed and amount > 0:
        return f"+{text}"
    return text
