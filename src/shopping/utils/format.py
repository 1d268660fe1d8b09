"""Display formatting for Naira amounts."""


def format_currency(amount: float, abbreviated: bool = True) -> str:
    """Format an amount as Naira, abbreviating thousands and millions.

    >>> format_currency(1500000)
    '₦1.50M'
    >>> format_currency(25000)
    '₦25.0K'
    >>> format_currency(500)
    '₦500'
    >>> format_currency(1500000, abbreviated=False)
    '₦1,500,000'
    """
    if abbreviated:
        if amount >= 1_000_000:
            return f"₦{amount / 1_000_000:.2f}M"
        if amount >= 1_000:
            return f"₦{amount / 1_000:.1f}K"
    return f"₦{amount:,.2f}".rstrip("0").rstrip(".")
