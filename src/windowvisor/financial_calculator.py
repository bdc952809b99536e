#!/usr/bin/env python3
"""
Financial Calculator for Quote Comparisons
Handles monetary normalization, line totals and savings calculations using the prices library.
"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Tuple

from prices import Money

from .models import ZERO, CENTS

logger = logging.getLogger(__name__)

HUNDRED = Decimal('100')

# Currency symbols, codes, thousands separators and whitespace
CURRENCY_NOISE = re.compile(r'[$€£,\s]|\b(?:USD|CAD|EUR|GBP|C)\b')


def to_decimal(value) -> Decimal:
    """
    Normalize a monetary value to a Decimal quantized to cents.

    Accepts Decimals, ints, floats and strings such as "$1,234.56".
    Anything unparseable becomes 0.00.
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int):
        amount = Decimal(value)
    elif isinstance(value, float):
        amount = Decimal(str(value))
    else:
        clean_str = CURRENCY_NOISE.sub('', str(value))
        try:
            amount = Decimal(clean_str)
        except InvalidOperation:
            logger.warning(f"Invalid monetary value: {value!r}")
            return ZERO

    if not amount.is_finite():
        return ZERO
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        logger.warning(f"Monetary value out of range: {value!r}")
        return ZERO


def unit_price(total_price, quantity: int) -> Decimal:
    """Split a line total evenly over its quantity."""
    total = to_decimal(total_price)
    if not quantity or quantity <= 0:
        return total
    return (total / Decimal(quantity)).quantize(CENTS, rounding=ROUND_HALF_UP)


def line_total(price_per_unit, quantity: int) -> Decimal:
    return (to_decimal(price_per_unit) * Decimal(quantity)).quantize(CENTS, rounding=ROUND_HALF_UP)


def savings_percentage(savings_amount: Decimal, competitor_price: Decimal) -> Decimal:
    """Savings as a percentage of the competitor price, 0 when that price is not positive."""
    if competitor_price <= 0:
        return Decimal('0')
    return savings_amount / competitor_price * HUNDRED


def calculate_savings(competitor_price, equivalent_price) -> Tuple[Decimal, Decimal]:
    """
    Calculate savings of an equivalent price against a competitor price.

    Returns:
        (savings amount, savings percentage)
    """
    competitor = to_decimal(competitor_price)
    equivalent = to_decimal(equivalent_price)
    amount = competitor - equivalent
    return amount, savings_percentage(amount, competitor)


class SavingsCalculator:
    """
    Aggregates comparison totals in a single currency.
    """

    def __init__(self, currency_code: str = 'USD'):
        self.currency_code = currency_code

    def to_money(self, amount) -> Money:
        return Money(to_decimal(amount), self.currency_code)

    def total(self, amounts: Iterable) -> Decimal:
        """Sum monetary amounts; every amount must share this calculator's currency."""
        running = Money(ZERO, self.currency_code)
        for amount in amounts:
            money = amount if isinstance(amount, Money) else self.to_money(amount)
            running = running + money
        return running.amount.quantize(CENTS, rounding=ROUND_HALF_UP)

    def savings(self, competitor_total, equivalent_total) -> Tuple[Decimal, Decimal]:
        competitor = self.to_money(competitor_total)
        equivalent = self.to_money(equivalent_total)
        difference = competitor - equivalent
        amount = difference.amount.quantize(CENTS, rounding=ROUND_HALF_UP)

        logger.debug(
            f"Savings: competitor={competitor.amount} equivalent={equivalent.amount} "
            f"difference={amount}"
        )
        return amount, savings_percentage(amount, competitor.amount)
