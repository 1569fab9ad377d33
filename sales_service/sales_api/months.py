from datetime import datetime

# Any leap year works; only the month component is read back.
_REFERENCE_YEAR = 2020

# Full name ("March") first, then abbreviation ("Mar"), then number ("3").
_MONTH_FORMATS = ("%B", "%b", "%m")


def month_number(name: str | None) -> int | None:
    """Map a month ("March", "Mar" or "3") to its 1-based number.

    Names are English and case-insensitive. Unknown or missing values give
    ``None``, which matches no records.
    """
    if not name or not name.strip():
        return None
    for fmt in _MONTH_FORMATS:
        try:
            parsed = datetime.strptime(f"{name.strip()} 01 {_REFERENCE_YEAR}", f"{fmt} %d %Y")
        except ValueError:
            continue
        return parsed.month
    return None
