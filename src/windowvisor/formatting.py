"""
Display formatting for window options and monetary values.
"""

from decimal import Decimal, ROUND_HALF_UP

from .models import WindowOptions

GLASS_TYPE_LABELS = {
    'single-pane': 'Single Pane Glass',
    'double-pane': 'Double Pane Glass',
    'triple-pane': 'Triple Pane Glass',
}

CURRENCY_SYMBOLS = {
    'USD': '$',
    'CAD': 'C$',
    'EUR': '€',
    'GBP': '£',
}


def format_material(material) -> str:
    """'vinyl' -> 'Vinyl Frame'"""
    if not material:
        return ""
    material = str(material)
    return f"{material[0].upper()}{material[1:]} Frame"


def format_glass_type(glass_type) -> str:
    return GLASS_TYPE_LABELS.get(glass_type, 'Double Pane Glass')


def format_options(options: WindowOptions) -> str:
    """Equivalent-side option summary, e.g. 'Vinyl Frame, Double Pane Glass'."""
    formatted_options = []

    if options.material:
        formatted_options.append(format_material(options.material))

    if options.glass_type:
        formatted_options.append(format_glass_type(options.glass_type))

    return ', '.join(formatted_options)


def format_currency(amount, currency_code: str = 'USD') -> str:
    """Format an amount as currency, e.g. -$1,234.50"""
    symbol = CURRENCY_SYMBOLS.get(currency_code, currency_code)
    rounded_amount = Decimal(amount).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    sign = '-' if rounded_amount < 0 else ''
    formatted = f"{abs(rounded_amount):,.2f}"

    if currency_code == 'EUR':
        return f"{sign}{formatted} {symbol}"
    return f"{sign}{symbol}{formatted}"


def format_percentage(value) -> str:
    rounded = Decimal(value).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)
    return f"{rounded}%"
