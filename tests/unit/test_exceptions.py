"""Unit tests for error payloads and quantity parsing."""

import pytest
from decimal import Decimal

from app.exceptions import (
    SaasError, InsufficientStockError, ConflictError, NotFoundError, ForbiddenError,
    InvalidQuantityError, InvalidInputError
)
from app.services.movement_service import parse_quantity, validate_unit


class TestErrorPayloads:

    def test_insufficient_stock_message_and_payload(self):
        error = InsufficientStockError('Harina', Decimal('100'), Decimal('70.000'), unit='kg', stock_item_id=7)

        assert error.status_code == 409
        assert error.message == 'Stock insuficiente para Harina: se requieren 100 kg, disponible 70 kg'

        body = error.to_dict()
        assert body['error'] == 'InsufficientStockError'
        assert body['status'] == 'error'
        assert body['required'] == '100'
        assert body['available'] == '70.000'
        assert body['stock_item_id'] == 7

    def test_insufficient_stock_keeps_fractional_quantities(self):
        error = InsufficientStockError('Aceite', Decimal('2.5'), Decimal('0.250'), unit='l')
        assert 'se requieren 2.5 l, disponible 0.25 l' in error.message

    @pytest.mark.parametrize('error,status', [
        (NotFoundError('x'), 404),
        (ForbiddenError(), 403),
        (ConflictError('x'), 409),
        (InvalidQuantityError('x'), 400),
    ])
    def test_status_codes(self, error, status):
        assert isinstance(error, SaasError)
        assert error.status_code == status


class TestParseQuantity:

    def test_parses_strings_and_numbers(self):
        assert parse_quantity('10.5') == Decimal('10.5')
        assert parse_quantity(3) == Decimal('3')

    @pytest.mark.parametrize('value', [None, '', 'abc', 'NaN', 'Infinity', True])
    def test_rejects_invalid(self, value):
        with pytest.raises(InvalidQuantityError):
            parse_quantity(value)

    def test_more_than_three_decimals_rejected(self):
        for value in ('0.0001', '1.2345'):
            with pytest.raises(InvalidQuantityError):
                parse_quantity(value)
        assert parse_quantity('1.5000') == Decimal('1.5')
        assert parse_quantity('0.001') == Decimal('0.001')

    def test_zero_rejected_unless_allowed(self):
        with pytest.raises(InvalidQuantityError):
            parse_quantity(0)
        assert parse_quantity(0, allow_zero=True) == Decimal('0')

    def test_unit_required(self):
        with pytest.raises(InvalidInputError):
            validate_unit('  ')
        assert validate_unit(' kg ') == 'kg'
