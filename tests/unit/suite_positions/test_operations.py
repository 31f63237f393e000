from __future__ import annotations

from decimal import Decimal

import pytest

from suite_positions import operations
from suite_positions.domain.instrument import Cash
from suite_positions.domain.position import Position, PositionType
from suite_positions.errors import IncompatibleInstrumentError

USD = Cash("USD")
EUR = Cash("EUR")


def test_add_and_subtract() -> None:
    assert operations.add(Position(USD, 10), Position(USD, 5)) == Position(USD, 15)
    assert operations.subtract(Position(USD, 10), Position(USD, 5)) == Position(USD, 5)

    with pytest.raises(IncompatibleInstrumentError):
        operations.add(Position(USD, 10), Position(EUR, 5))
    with pytest.raises(TypeError):
        operations.add(Position(USD, 10), 5)
    with pytest.raises(TypeError):
        operations.subtract(10, Position(USD, 5))


def test_multiply_scalar_and_position_in_any_order() -> None:
    position = Position(USD, "2.50")

    assert operations.multiply(2, position) == Position(USD, 5)
    assert operations.multiply(position, 2) == Position(USD, 5)


def test_multiply_scalar_and_instrument_builds_position() -> None:
    assert operations.multiply(Decimal("12.345"), USD) == Position(USD, "12.34")
    assert operations.multiply(USD, 3) == Position(USD, 3)


def test_multiply_requires_exactly_one_scalar() -> None:
    with pytest.raises(TypeError):
        operations.multiply(Position(USD, 1), Position(USD, 1))
    with pytest.raises(TypeError):
        operations.multiply(USD, Position(USD, 1))
    with pytest.raises(TypeError):
        operations.multiply(2, 3)


def test_divide() -> None:
    assert operations.divide(Position(USD, "10.00"), Position(USD, "5.00")) == 2
    assert operations.divide(Position(USD, 9), 2) == Position(USD, "4.50")

    with pytest.raises(IncompatibleInstrumentError):
        operations.divide(Position(USD, 1), Position(EUR, 1))
    with pytest.raises(TypeError):
        operations.divide(Position(USD, 1), USD)
    with pytest.raises(TypeError):
        operations.divide(1, Position(USD, 1))


def test_zero_one_and_cash() -> None:
    position_type = PositionType(EUR)

    assert operations.zero(position_type) == Position(EUR, 0)
    assert operations.one(position_type) == Position(EUR, 1)
    assert operations.cash(Position(EUR, 1)) is EUR

    with pytest.raises(TypeError):
        operations.zero(EUR)
    with pytest.raises(TypeError):
        operations.one(Position(EUR, 1))
    with pytest.raises(TypeError):
        operations.cash(EUR)


def test_total() -> None:
    positions = [Position(USD, 1), Position(USD, "2.25"), Position(USD, "-0.25")]

    assert operations.total(positions) == Position(USD, 3)
    assert operations.total([], PositionType(USD)) == Position(USD, 0)
    assert operations.total(iter(positions), PositionType(USD, 128)).storage_bits == 128

    with pytest.raises(ValueError):
        operations.total([])
    with pytest.raises(IncompatibleInstrumentError):
        operations.total([Position(USD, 1), Position(EUR, 1)])


def test_promote() -> None:
    p1, p2 = operations.promote(Position(USD, 1), Position(USD, 1, storage_bits=128))
    assert p1.storage_bits == p2.storage_bits == 128
