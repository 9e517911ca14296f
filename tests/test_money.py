from decimal import Decimal

from qios.utils.money import compute_tax, round_money, to_decimal


def test_to_decimal():
    assert to_decimal(None) == Decimal("0")
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("1500") == Decimal("1500")


def test_round_money_half_up():
    assert round_money(Decimal("1650.5")) == Decimal("1651")
    assert round_money(Decimal("1650.49")) == Decimal("1650")
    assert round_money(Decimal("2.5")) == Decimal("3")


def test_compute_tax():
    assert compute_tax(Decimal("60000"), Decimal("0.11")) == Decimal("6600")
    assert compute_tax(Decimal("15005"), Decimal("0.11")) == Decimal("1651")
    assert compute_tax(Decimal("0"), Decimal("0.11")) == Decimal("0")
