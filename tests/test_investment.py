"""Tests for investment yield accretion and redemption."""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from finkeep.domain.entities import DailyRate, TransactionType
from finkeep.domain.errors import (
    InsufficientFundsError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
)
from finkeep.domain.investment import YieldService, tax_rate_for
from finkeep.domain.rates import RateProvider, StaticRateProvider

NOW = datetime(2026, 6, 1, 12, 0, 0)


class FailingRateProvider(RateProvider):
    """Rate source that is always down."""

    def get_daily_rate(self) -> DailyRate:
        raise UpstreamUnavailableError("rate service down")


@pytest.fixture
def make_investment(account_service, workspace_id):
    """Factory for investment accounts created ``days_ago`` days before NOW."""

    def _make(balance="1000", days_ago=400, cdi=None, name="CDB"):
        account_id = account_service.create_account(
            workspace_id,
            name=name,
            initial_balance=Decimal(balance),
            is_investment=True,
            cdi_percentage=cdi,
            created_at=NOW - timedelta(days=days_ago),
        )
        return account_service.get_account(workspace_id, account_id)

    return _make


class TestTaxBrackets:
    """Tests for the redemption tax rate by holding period."""

    @pytest.mark.parametrize(
        "days, rate",
        [
            (0, "0.225"),
            (180, "0.225"),
            (181, "0.20"),
            (360, "0.20"),
            (361, "0.175"),
            (720, "0.175"),
            (721, "0.15"),
        ],
    )
    def test_brackets(self, days, rate):
        assert tax_rate_for(days) == Decimal(rate)

    @pytest.mark.parametrize("days, rate", [(181, "0.20"), (361, "0.175"), (721, "0.15"), (180, "0.225")])
    def test_quote_uses_account_age(self, redemption_service, workspace_id, make_investment, days, rate):
        account = make_investment(days_ago=days)
        quote = redemption_service.quote_redemption(
            workspace_id, account.id, Decimal("100"), now=NOW
        )
        assert quote.days_held == days
        assert quote.tax_rate == Decimal(rate)


class TestYieldAccretion:
    """Tests for the daily yield batch."""

    def test_credits_yield_once_per_day(
        self, temp_db, account_service, transaction_service, workspace_id, make_investment
    ):
        account = make_investment()
        service = YieldService(temp_db, StaticRateProvider("0.5"))

        result = service.run_yield_accretion(workspace_id, now=NOW)
        assert result.processed == 1
        assert result.credited_account_ids == (account.id,)

        updated = account_service.get_account(workspace_id, account.id)
        assert updated.current_balance == Decimal("1005")
        assert updated.last_yield_update == NOW
        # Yield is income, not principal
        assert updated.total_invested == Decimal("1000")

        (txn,) = transaction_service.list_transactions(workspace_id, bank_account_id=account.id)
        assert txn.type == TransactionType.INCOME
        assert txn.is_paid
        assert txn.amount == Decimal("5")
        assert txn.description == "Rendimento Diário (100% CDI)"

        # Same day again: nothing changes
        again = service.run_yield_accretion(workspace_id, now=NOW + timedelta(hours=3))
        assert again.processed == 0
        assert again.skipped == 1
        assert account_service.get_account(workspace_id, account.id).current_balance == Decimal("1005")

        # Next day accrues on the new balance
        service.run_yield_accretion(workspace_id, now=NOW + timedelta(days=1))
        assert account_service.get_account(workspace_id, account.id).current_balance == Decimal("1010.025")

    def test_cdi_percentage_scales_yield(self, temp_db, account_service, workspace_id, make_investment):
        account = make_investment(cdi=Decimal("110"))
        YieldService(temp_db, StaticRateProvider("0.05")).run_yield_accretion(workspace_id, now=NOW)
        # 1000 * 0.05% * 110%
        assert account_service.get_account(workspace_id, account.id).current_balance == Decimal("1000.55")

    def test_below_one_cent_only_stamps(
        self, temp_db, account_service, transaction_service, workspace_id, make_investment
    ):
        account = make_investment(balance="10")
        YieldService(temp_db, StaticRateProvider("0.05")).run_yield_accretion(workspace_id, now=NOW)

        updated = account_service.get_account(workspace_id, account.id)
        assert updated.current_balance == Decimal("10")
        assert updated.last_yield_update == NOW
        assert transaction_service.list_transactions(workspace_id, bank_account_id=account.id) == []

    @pytest.mark.parametrize(
        "balance, credited",
        [("19.9", False), ("20", True)],
    )
    def test_cent_threshold_uses_unrounded_yield(
        self, temp_db, account_service, transaction_service, workspace_id, make_investment,
        balance, credited,
    ):
        # 19.9 * 0.05% is 0.00995, which would round up to a cent
        account = make_investment(balance=balance)
        YieldService(temp_db, StaticRateProvider("0.05")).run_yield_accretion(workspace_id, now=NOW)

        txns = transaction_service.list_transactions(workspace_id, bank_account_id=account.id)
        updated = account_service.get_account(workspace_id, account.id)
        if credited:
            assert [t.amount for t in txns] == [Decimal("0.01")]
            assert updated.current_balance == Decimal("20.01")
        else:
            assert txns == []
            assert updated.current_balance == Decimal("19.9")
        assert updated.last_yield_update == NOW

    def test_skips_non_investment_and_empty_accounts(
        self, temp_db, account_service, workspace_id, checking, make_investment
    ):
        make_investment(balance="0", name="Empty")
        result = YieldService(temp_db, StaticRateProvider("0.5")).run_yield_accretion(
            workspace_id, now=NOW
        )
        assert result.processed == 0
        assert account_service.get_account(workspace_id, checking.id).current_balance == Decimal("1000")

    def test_workspace_without_users_is_skipped(self, temp_db, account_service):
        workspace_id = temp_db.create_workspace("Orphan")
        account_id = account_service.create_account(
            workspace_id, name="CDB", initial_balance=Decimal("1000"), is_investment=True
        )
        result = YieldService(temp_db, StaticRateProvider("0.5")).run_yield_accretion(now=NOW)

        assert result.skipped == 1
        account = account_service.get_account(workspace_id, account_id)
        assert account.current_balance == Decimal("1000")
        assert account.last_yield_update is None

    def test_all_workspaces(self, temp_db, account_service, workspace_id, other_workspace_id, make_investment):
        mine = make_investment()
        theirs = account_service.create_account(
            other_workspace_id, name="LCI", initial_balance=Decimal("2000"), is_investment=True
        )
        result = YieldService(temp_db, StaticRateProvider("0.5")).run_yield_accretion(now=NOW)

        assert set(result.credited_account_ids) == {mine.id, theirs}
        assert account_service.get_account(other_workspace_id, theirs).current_balance == Decimal("2010")

    def test_rate_failure_aborts_batch(self, temp_db, account_service, workspace_id, make_investment):
        account = make_investment()
        with pytest.raises(UpstreamUnavailableError):
            YieldService(temp_db, FailingRateProvider()).run_yield_accretion(workspace_id, now=NOW)

        untouched = account_service.get_account(workspace_id, account.id)
        assert untouched.current_balance == Decimal("1000")
        assert untouched.last_yield_update is None


class TestRedemption:
    """Tests for redemptions with withholding tax."""

    @pytest.fixture
    def grown(self, temp_db, account_service, workspace_id, make_investment):
        """Investment of 1000 held 400 days that earned 5 of yield."""
        account = make_investment()
        YieldService(temp_db, StaticRateProvider("0.5")).run_yield_accretion(workspace_id, now=NOW)
        return account_service.get_account(workspace_id, account.id)

    def test_quote_computes_tax_on_profit_share(self, redemption_service, workspace_id, grown):
        quote = redemption_service.quote_redemption(workspace_id, grown.id, Decimal("500"), now=NOW)

        # profit 5, ratio 500/1005, 17.5% after 360 days
        assert quote.tax_rate == Decimal("0.175")
        assert quote.proportional_profit == Decimal("2.4876")
        assert quote.tax_amount == Decimal("0.4353")
        assert quote.net_amount == Decimal("499.5647")
        assert quote.principal_reduction == Decimal("497.5124")

    def test_redeem_to_destination(
        self, redemption_service, account_service, transaction_service, workspace_id, checking, grown
    ):
        result = redemption_service.redeem(
            workspace_id, grown.id, Decimal("500"), destination_account_id=checking.id, now=NOW
        )

        source = account_service.get_account(workspace_id, grown.id)
        assert source.current_balance == Decimal("505")
        assert source.total_invested == Decimal("1000") - result.principal_reduction

        destination = account_service.get_account(workspace_id, checking.id)
        assert destination.current_balance == Decimal("1000") + result.net_amount

        descriptions = {t.description for t in transaction_service.list_transactions(workspace_id)}
        assert "IR sobre Resgate (17.5%)" in descriptions
        assert "Resgate Investimento -> Checking" in descriptions
        assert "Resgate de CDB" in descriptions

    def test_redeem_without_destination(
        self, redemption_service, account_service, transaction_service, workspace_id, grown
    ):
        redemption_service.redeem(workspace_id, grown.id, Decimal("100"), now=NOW)

        assert account_service.get_account(workspace_id, grown.id).current_balance == Decimal("905")
        expenses = transaction_service.list_transactions(
            workspace_id, type="EXPENSE", bank_account_id=grown.id
        )
        assert {t.description for t in expenses} == {"Resgate Investimento", "IR sobre Resgate (17.5%)"}

    def test_no_profit_books_no_tax(
        self, redemption_service, transaction_service, workspace_id, make_investment
    ):
        account = make_investment()
        result = redemption_service.redeem(workspace_id, account.id, Decimal("200"), now=NOW)

        assert result.tax_amount == Decimal("0")
        assert result.net_amount == Decimal("200")
        (txn,) = transaction_service.list_transactions(workspace_id, bank_account_id=account.id)
        assert txn.description == "Resgate Investimento"

    @pytest.mark.parametrize(
        "profit, booked",
        [("0.0602", True), ("0.06", False)],
    )
    def test_tax_threshold_uses_unrounded_tax(
        self, temp_db, redemption_service, transaction_service, workspace_id, make_investment,
        profit, booked,
    ):
        # At 15% both profits round to a tax of 0.0090
        account = make_investment(days_ago=800)
        temp_db.increment_account_balance(workspace_id, account.id, Decimal(profit))
        amount = Decimal("1000") + Decimal(profit)

        result = redemption_service.redeem(workspace_id, account.id, amount, now=NOW)

        assert result.tax_amount == Decimal("0.0090")
        assert result.books_tax is booked
        descriptions = [
            t.description
            for t in transaction_service.list_transactions(workspace_id, bank_account_id=account.id)
        ]
        assert ("IR sobre Resgate (15.0%)" in descriptions) is booked

    def test_redeem_more_than_balance(self, redemption_service, account_service, workspace_id, grown):
        with pytest.raises(InsufficientFundsError):
            redemption_service.redeem(workspace_id, grown.id, Decimal("2000"), now=NOW)
        assert account_service.get_account(workspace_id, grown.id).current_balance == Decimal("1005")

    def test_redeem_from_plain_account(self, redemption_service, workspace_id, checking):
        with pytest.raises(ValidationError, match="not an investment"):
            redemption_service.redeem(workspace_id, checking.id, Decimal("10"), now=NOW)

    def test_redeem_into_itself(self, redemption_service, workspace_id, grown):
        with pytest.raises(ValidationError, match="differ"):
            redemption_service.redeem(
                workspace_id, grown.id, Decimal("10"), destination_account_id=grown.id, now=NOW
            )

    def test_redeem_to_missing_destination(self, redemption_service, account_service, workspace_id, grown):
        with pytest.raises(NotFoundError):
            redemption_service.redeem(
                workspace_id, grown.id, Decimal("10"), destination_account_id=999, now=NOW
            )
        assert account_service.get_account(workspace_id, grown.id).current_balance == Decimal("1005")
