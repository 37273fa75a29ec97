"""Tests for the ledger store."""

from decimal import Decimal

import pytest
from sqlalchemy import update

from paperfx.models import Account
from paperfx.services import ledger


class TestCreateAccount:
    """Tests for create_account."""

    @pytest.mark.asyncio
    async def test_starting_balance(self, test_session):
        """New accounts start with 1000 cash and equal equity."""
        account = await ledger.create_account(
            test_session, "Ana", "ana@x.com", "hash"
        )
        await test_session.commit()

        assert account.cash_balance == Decimal("1000")
        assert account.equity == Decimal("1000")
        assert account.created_at is not None

    @pytest.mark.asyncio
    async def test_email_normalized(self, test_session):
        """Emails are stored stripped and lower-cased."""
        account = await ledger.create_account(
            test_session, "Ana", "  Ana@X.com ", "hash"
        )
        await test_session.commit()

        assert account.email == "ana@x.com"
        found = await ledger.get_account_by_email(test_session, "ANA@x.COM")
        assert found is not None
        assert found.id == account.id

    @pytest.mark.asyncio
    async def test_unique_ids(self, test_session):
        """Each account gets its own identifier."""
        a = await ledger.create_account(test_session, "A", "a@x.com", "hash")
        b = await ledger.create_account(test_session, "B", "b@x.com", "hash")
        await test_session.commit()

        assert a.id != b.id


class TestGetAccount:
    """Tests for account lookups."""

    @pytest.mark.asyncio
    async def test_unknown_account(self, test_session):
        """Returns None for unknown IDs and emails."""
        assert await ledger.get_account(test_session, "missing") is None
        assert await ledger.get_account_by_email(test_session, "nobody@x.com") is None

    @pytest.mark.asyncio
    async def test_for_update_reloads_balance(self, test_session, account):
        """A for_update read replaces a stale balance held by the session."""
        await test_session.execute(
            update(Account)
            .where(Account.id == account.id)
            .values(cash_balance=Decimal("42.50"))
            .execution_options(synchronize_session=False)
        )

        stale = await ledger.get_account(test_session, account.id)
        assert stale.cash_balance == Decimal("1000.00")

        fresh = await ledger.get_account(test_session, account.id, for_update=True)
        assert fresh is account
        assert fresh.cash_balance == Decimal("42.50")

    @pytest.mark.asyncio
    async def test_list_accounts(self, test_session, account):
        """Lists every registered account."""
        accounts = await ledger.list_accounts(test_session)
        assert [a.id for a in accounts] == [account.id]


class TestBalanceMutation:
    """Tests for debit and credit."""

    @pytest.mark.asyncio
    async def test_debit(self, account):
        """Debit subtracts and returns the new balance."""
        balance = ledger.debit(account, Decimal("2.20"))
        assert balance == Decimal("997.80")
        assert account.cash_balance == Decimal("997.80")

    @pytest.mark.asyncio
    async def test_credit(self, account):
        """Credit adds and returns the new balance."""
        balance = ledger.credit(account, Decimal("0.40"))
        assert balance == Decimal("1000.40")

    @pytest.mark.asyncio
    async def test_overdraft_allowed(self, test_session, account):
        """Debiting past zero is accepted and persisted."""
        balance = ledger.debit(account, Decimal("1500.25"))
        await test_session.commit()

        assert balance == Decimal("-500.25")
        reloaded = await ledger.get_account(test_session, account.id, for_update=True)
        assert reloaded.cash_balance == Decimal("-500.25")
        assert reloaded.equity == Decimal("-500.25")

    @pytest.mark.asyncio
    async def test_exact_decimal_arithmetic(self, test_session, account):
        """Many small mutations leave no floating-point residue."""
        for _ in range(1000):
            ledger.debit(account, Decimal("0.1"))
        for _ in range(1000):
            ledger.credit(account, Decimal("0.1"))
        await test_session.commit()

        reloaded = await ledger.get_account(test_session, account.id, for_update=True)
        assert reloaded.cash_balance == Decimal("1000.00")
        assert str(reloaded.cash_balance) == "1000.00"
