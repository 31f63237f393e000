from __future__ import annotations

import copy
import pickle

import pytest

from suite_positions.domain.monetary.currency import Currency
from suite_positions.domain.monetary.currency_registry import CurrencyRegistry
from suite_positions.errors import UnknownCurrencyError


def test_of_returns_canonical_handle(registry) -> None:
    first = Currency.of("USD", registry)
    second = Currency.of(" usd ", registry)
    third = Currency("USD", registry)

    assert first is second is third
    assert first == third
    assert hash(first) == hash(third)
    assert registry.owns_handle(first)


def test_accessors_delegate_to_record(registry) -> None:
    usd = Currency.of("USD", registry)

    assert usd.identifier == "USD"
    assert usd.currency == "USD"
    assert usd.unit == 2
    assert usd.code == "USD"
    assert usd.name == "US Dollar"
    assert usd.numeric_code == 840
    assert usd.record is registry.lookup("USD")
    assert usd.registry is registry


def test_unknown_identifier_raises(registry) -> None:
    with pytest.raises(UnknownCurrencyError):
        Currency.of("GBP", registry)


def test_handles_of_separate_registries_are_distinct(registry) -> None:
    other = CurrencyRegistry([("USD", 2, "USD", "US Dollar", 840)])

    assert Currency.of("USD", registry) is not Currency.of("USD", other)
    assert not other.owns_handle(Currency.of("USD", registry))


def test_distinct_identifiers_give_distinct_handles(registry) -> None:
    assert Currency.of("USD", registry) != Currency.of("EUR", registry)


def test_default_registry_handle() -> None:
    usd = Currency.of("USD")
    assert usd is Currency("usd")
    assert usd.unit == 2
    assert Currency.of("JPY").unit == 0


def test_copy_and_pickle_keep_identity() -> None:
    usd = Currency.of("USD")

    assert copy.copy(usd) is usd
    assert copy.deepcopy(usd) is usd
    assert pickle.loads(pickle.dumps(usd)) is usd


def test_str_and_repr(registry) -> None:
    jpy = Currency.of("JPY", registry)
    assert str(jpy) == "JPY"
    assert repr(jpy) == "Currency('JPY')"
