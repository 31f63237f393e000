"""
Property-based tests for Position arithmetic.

INVARIANTS:
- Currency handles are singletons per identifier.
- Cash scale always equals the currency's minor-unit digits.
- add then subtract returns the original Position (exact same-scale arithmetic).
- Positions of different instruments never combine.
- 1 * p == p and 0 * p == zero of p's type.
"""

from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from suite_positions.domain.instrument import Cash
from suite_positions.domain.monetary.currency import Currency
from suite_positions.domain.monetary.currency_registry import get_default_registry
from suite_positions.domain.position import Position
from suite_positions.errors import IncompatibleInstrumentError

IDENTIFIERS = ["USD", "EUR", "JPY", "GBP", "KWD", "BHD", "CLF", "CHF", "ISK"]


# =============================================================================
# STRATEGIES
# =============================================================================

@st.composite
def position_of(draw, identifier: str):
    """Generate a Position of $identifier with an amount that fits 64-bit storage."""
    cash = Cash(identifier)
    units = draw(st.integers(min_value=-(10**15), max_value=10**15))
    return Position(cash, Decimal(units).scaleb(-cash.scale))


@st.composite
def same_currency_pair(draw):
    identifier = draw(st.sampled_from(IDENTIFIERS))
    return draw(position_of(identifier)), draw(position_of(identifier))


@st.composite
def different_currency_pair(draw):
    left, right = draw(st.lists(st.sampled_from(IDENTIFIERS), min_size=2, max_size=2, unique=True))
    return draw(position_of(left)), draw(position_of(right))


@st.composite
def any_position(draw):
    return draw(position_of(draw(st.sampled_from(IDENTIFIERS))))


# =============================================================================
# PROPERTIES
# =============================================================================

@given(st.sampled_from(get_default_registry().identifiers()))
def test_currency_handles_are_singletons(identifier):
    assert Currency.of(identifier) is Currency.of(identifier)
    assert Currency.of(identifier) == Currency(identifier.lower())


@given(st.sampled_from(get_default_registry().identifiers()))
def test_cash_scale_matches_minor_unit(identifier):
    assert Cash(identifier).unit == Currency.of(identifier).unit
    assert Cash(identifier).scale == get_default_registry().lookup(identifier).minor_unit_digits


@given(same_currency_pair())
def test_add_then_subtract_round_trips(pair):
    p1, p2 = pair
    assert (p1 + p2) - p2 == p1


@given(same_currency_pair())
def test_addition_is_commutative(pair):
    p1, p2 = pair
    assert p1 + p2 == p2 + p1


@given(different_currency_pair())
def test_different_instruments_never_combine(pair):
    p1, p2 = pair
    with pytest.raises(IncompatibleInstrumentError):
        p1 + p2
    with pytest.raises(IncompatibleInstrumentError):
        p1 - p2


@given(any_position())
def test_scalar_identities(position):
    assert 1 * position == position
    assert 0 * position == position.type.zero()
    assert position * 1 == position


@given(any_position())
def test_display_is_amount_then_symbol(position):
    text = str(position)
    assert text.endswith(position.instrument.symbol)
    assert Decimal(text[: -len(position.instrument.symbol)]) == position.amount
