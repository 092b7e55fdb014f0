"""Tests for money helpers and account resolution."""

import pytest
from decimal import Decimal

from finkeep.domain.errors import NotFoundError, ValidationError
from finkeep.utils.account_resolver import resolve_account
from finkeep.utils.money import format_money, quantize_money, split_evenly, to_decimal


def test_quantize_rounds_half_up():
    assert quantize_money(Decimal("0.00005")) == Decimal("0.0001")
    assert quantize_money(Decimal("2.48756218")) == Decimal("2.4876")


def test_split_evenly():
    assert split_evenly(Decimal("1000"), 3) == Decimal("333.3333")
    assert split_evenly(Decimal("600"), 3) == Decimal("200")
    with pytest.raises(ValueError):
        split_evenly(Decimal("10"), 0)


def test_to_decimal_accepts_floats_by_repr():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("12.5") == Decimal("12.5")


def test_format_money():
    assert format_money(Decimal("1234567.891")) == "1,234,567.89"
    assert format_money(Decimal("-0.005")) == "-0.01"


class TestResolveAccount:
    """Tests for resolving account names and IDs."""

    def test_by_id_and_name(self, account_service, workspace_id, checking):
        assert resolve_account(account_service, workspace_id, checking.id) == checking.id
        assert resolve_account(account_service, workspace_id, str(checking.id)) == checking.id
        assert resolve_account(account_service, workspace_id, " CHECKING ") == checking.id

    def test_unknown(self, account_service, workspace_id):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, workspace_id, "Nowhere")
        with pytest.raises(NotFoundError):
            resolve_account(account_service, workspace_id, 12)

    def test_ambiguous_name(self, account_service, workspace_id):
        account_service.create_account(workspace_id, name="Wallet")
        account_service.create_account(workspace_id, name="wallet")
        with pytest.raises(ValidationError, match="ambiguous"):
            resolve_account(account_service, workspace_id, "Wallet")

    def test_other_workspace(self, account_service, other_workspace_id, checking):
        with pytest.raises(NotFoundError):
            resolve_account(account_service, other_workspace_id, "Checking")
