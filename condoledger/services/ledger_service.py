"""Ledger service for owner running accounts.

Provides methods for:
- Opening an account (with an optional opening-balance posting)
- Posting credits and debits
- Closing an account once its postings are gone
- Account and posting queries with formatted amounts
- Reconciling the cached balance against the postings

Every posting is written in the same transaction as the balance change it
causes. The balance change is a single ``UPDATE ... SET current_balance =
current_balance + :delta`` so concurrent postings on one account cannot
overwrite each other.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session, sessionmaker

from condoledger.models import LedgerAccount, Owner, Posting, PostingKind
from condoledger.schemas.ledger import AccountView, BalanceCheck, PostingView
from condoledger.services.clock import Clock, SystemClock, ensure_utc
from condoledger.services.db import read_session, unit_of_work
from condoledger.services.errors import ConflictError, InvalidAmountError, NotFoundError
from condoledger.services.locale_service import MoneyFormat, MoneyInput

logger = logging.getLogger(__name__)

OPENING_BALANCE_DESCRIPTION = "Opening balance"


class LedgerService:
    """Running accounts and their postings."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        money: Optional[MoneyFormat] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize ledger service.

        Args:
            session_factory: Factory producing one session per operation
            money: Amount parser/formatter (default: MoneyFormat())
            clock: Source of default timestamps (default: SystemClock())
        """
        self.session_factory = session_factory
        self.money = money or MoneyFormat()
        self.clock = clock or SystemClock()

    def open(self, owner_id: int, initial_balance: MoneyInput = None) -> AccountView:
        """Open a ledger account for an owner.

        The account starts at zero. A positive initial balance is recorded
        as an opening CREDIT posting in the same transaction.

        Args:
            owner_id: Owner ID
            initial_balance: Opening balance (optional)

        Returns:
            Created account

        Raises:
            NotFoundError: If the owner does not exist
            ConflictError: If the owner already has an account
            InvalidAmountError: If the initial balance is negative or malformed
        """
        opening = Decimal("0")
        if initial_balance not in (None, ""):
            opening = self.money.quantize(self.money.parse_strict(initial_balance))
        if opening < 0:
            logger.error(f"Invalid initial balance for owner {owner_id}: {opening}")
            raise InvalidAmountError("Initial balance cannot be negative")

        now = self.clock.now()
        with unit_of_work(self.session_factory) as db:
            if db.get(Owner, owner_id) is None:
                raise NotFoundError(f"Owner {owner_id} not found")
            existing = db.execute(
                select(LedgerAccount.id).where(LedgerAccount.owner_id == owner_id)
            ).first()
            if existing:
                raise ConflictError(f"Owner {owner_id} already has a ledger account")

            account = LedgerAccount(
                owner_id=owner_id,
                initial_balance=opening,
                current_balance=Decimal("0"),
            )
            db.add(account)
            db.flush()

            if opening > 0:
                self._record(db, account.id, PostingKind.CREDIT, opening, OPENING_BALANCE_DESCRIPTION, now)
                db.refresh(account)

            view = self._account_view(account)

        logger.info(f"Opened ledger account ID={view.id} for owner {owner_id} with {opening}")
        return view

    def post(
        self,
        account_id: int,
        kind: PostingKind | str,
        amount: MoneyInput,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> PostingView:
        """Record a credit or debit on an account.

        Args:
            account_id: Ledger account ID
            kind: CREDIT or DEBIT (case-insensitive)
            amount: Positive magnitude, number or locale-formatted string
            description: Optional description
            occurred_at: When the movement happened (default: now)

        Returns:
            Created posting

        Raises:
            InvalidAmountError: If the amount is not a positive number
            NotFoundError: If the account does not exist
        """
        posting_kind = PostingKind.parse(kind)
        value = self._positive_amount(amount)
        when = ensure_utc(occurred_at) if occurred_at else self.clock.now()

        with unit_of_work(self.session_factory) as db:
            if db.get(LedgerAccount, account_id) is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            posting = self._record(db, account_id, posting_kind, value, description, when)
            view = self._posting_view(posting)

        logger.info(
            f"Recorded posting: account_id={account_id}, kind={posting_kind.value}, "
            f"amount={value}, posting_id={view.id}"
        )
        return view

    def post_for_owner(
        self,
        owner_id: int,
        kind: PostingKind | str,
        amount: MoneyInput,
        description: Optional[str] = None,
        occurred_at: Optional[datetime] = None,
    ) -> PostingView:
        """Record a posting on the owner's account.

        Raises:
            NotFoundError: If the owner has no ledger account
            InvalidAmountError: If the amount is not a positive number
        """
        posting_kind = PostingKind.parse(kind)
        value = self._positive_amount(amount)
        when = ensure_utc(occurred_at) if occurred_at else self.clock.now()

        with unit_of_work(self.session_factory) as db:
            account_id = db.execute(
                select(LedgerAccount.id).where(LedgerAccount.owner_id == owner_id)
            ).scalar_one_or_none()
            if account_id is None:
                raise NotFoundError(f"No ledger account for owner {owner_id}")
            posting = self._record(db, account_id, posting_kind, value, description, when)
            view = self._posting_view(posting)

        logger.info(
            f"Recorded posting for owner {owner_id}: account_id={account_id}, "
            f"kind={posting_kind.value}, amount={value}"
        )
        return view

    def close(self, account_id: int) -> None:
        """Delete an account that has no postings left.

        Postings are never deleted implicitly; use clear_postings first.

        Raises:
            NotFoundError: If the account does not exist
            ConflictError: If the account still has postings
        """
        with unit_of_work(self.session_factory) as db:
            account = db.get(LedgerAccount, account_id)
            if account is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            remaining = db.execute(
                select(func.count(Posting.id)).where(Posting.account_id == account_id)
            ).scalar_one()
            if remaining:
                logger.error(f"Cannot close account {account_id}: {remaining} postings remain")
                raise ConflictError(
                    f"Ledger account {account_id} still has {remaining} postings"
                )
            db.delete(account)

        logger.info(f"Closed ledger account ID={account_id}")

    def clear_postings(self, account_id: int) -> int:
        """Remove every posting of an account and reset its balance to zero.

        Privileged maintenance step that precedes close().

        Returns:
            Number of postings removed

        Raises:
            NotFoundError: If the account does not exist
        """
        with unit_of_work(self.session_factory) as db:
            if db.get(LedgerAccount, account_id) is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            result = db.execute(
                delete(Posting)
                .where(Posting.account_id == account_id)
                .execution_options(synchronize_session=False)
            )
            db.execute(
                update(LedgerAccount)
                .where(LedgerAccount.id == account_id)
                .values(current_balance=Decimal("0"))
                .execution_options(synchronize_session=False)
            )
            removed = result.rowcount

        logger.warning(f"Cleared {removed} postings from ledger account ID={account_id}")
        return removed

    def get(self, account_id: int) -> AccountView:
        """Get account by ID.

        Raises:
            NotFoundError: If the account does not exist
        """
        with read_session(self.session_factory) as db:
            account = db.get(LedgerAccount, account_id)
            if account is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            return self._account_view(account)

    def get_by_owner(self, owner_id: int) -> AccountView:
        """Get the owner's account.

        Raises:
            NotFoundError: If the owner has no account
        """
        accounts = self.list_by_owner(owner_id)
        if not accounts:
            raise NotFoundError(f"No ledger account for owner {owner_id}")
        return accounts[0]

    def list_by_owner(self, owner_id: int) -> List[AccountView]:
        """List the accounts of an owner (zero or one)."""
        with read_session(self.session_factory) as db:
            accounts = db.execute(
                select(LedgerAccount).where(LedgerAccount.owner_id == owner_id)
            ).scalars().all()
            return [self._account_view(account) for account in accounts]

    def list_accounts(self) -> List[AccountView]:
        """List all accounts, newest first."""
        with read_session(self.session_factory) as db:
            accounts = db.execute(
                select(LedgerAccount).order_by(LedgerAccount.id.desc())
            ).scalars().all()
            return [self._account_view(account) for account in accounts]

    def list_postings(self, account_id: int) -> List[PostingView]:
        """List postings of an account, oldest first.

        Raises:
            NotFoundError: If the account does not exist
        """
        with read_session(self.session_factory) as db:
            if db.get(LedgerAccount, account_id) is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            postings = db.execute(
                select(Posting)
                .where(Posting.account_id == account_id)
                .order_by(Posting.occurred_at, Posting.id)
            ).scalars().all()
            return [self._posting_view(posting) for posting in postings]

    def reconcile(self, account_id: int) -> BalanceCheck:
        """Compare the cached balance with the signed sum of postings.

        Read-only; drift is logged, never corrected here.

        Raises:
            NotFoundError: If the account does not exist
        """
        with read_session(self.session_factory) as db:
            account = db.get(LedgerAccount, account_id)
            if account is None:
                raise NotFoundError(f"Ledger account {account_id} not found")
            postings = db.execute(
                select(Posting).where(Posting.account_id == account_id)
            ).scalars().all()
            total = sum((posting.signed_amount for posting in postings), Decimal("0"))
            check = BalanceCheck(
                account_id=account_id,
                current_balance=account.current_balance,
                postings_total=total,
                posting_count=len(postings),
            )

        if not check.consistent:
            logger.warning(
                f"Balance drift on account {account_id}: cached={check.current_balance}, "
                f"postings={check.postings_total}"
            )
        return check

    def _positive_amount(self, amount: MoneyInput) -> Decimal:
        try:
            return self.money.parse_positive(amount, what="Posting amount")
        except InvalidAmountError:
            logger.error(f"Invalid posting amount: {amount!r}")
            raise

    def _record(
        self,
        db: Session,
        account_id: int,
        kind: PostingKind,
        amount: Decimal,
        description: Optional[str],
        occurred_at: datetime,
    ) -> Posting:
        """Insert a posting and apply its signed amount to the account balance."""
        posting = Posting(
            account_id=account_id,
            kind=kind,
            amount=amount,
            description=description,
            occurred_at=occurred_at,
        )
        db.add(posting)
        db.flush()
        self._apply_delta(db, account_id, kind.sign(amount))
        return posting

    def _apply_delta(self, db: Session, account_id: int, delta: Decimal) -> None:
        result = db.execute(
            update(LedgerAccount)
            .where(LedgerAccount.id == account_id)
            .values(current_balance=LedgerAccount.current_balance + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFoundError(f"Ledger account {account_id} not found")

    def _account_view(self, account: LedgerAccount) -> AccountView:
        return AccountView(
            id=account.id,
            owner_id=account.owner_id,
            initial_balance=account.initial_balance,
            current_balance=account.current_balance,
            created_at=account.created_at,
            initial_balance_display=self.money.format(account.initial_balance),
            current_balance_display=self.money.format(account.current_balance),
        )

    def _posting_view(self, posting: Posting) -> PostingView:
        occurred_at = ensure_utc(posting.occurred_at)
        return PostingView(
            id=posting.id,
            account_id=posting.account_id,
            kind=posting.kind,
            amount=posting.amount,
            signed_amount=posting.signed_amount,
            description=posting.description,
            occurred_at=occurred_at,
            amount_display=self.money.format(posting.amount),
            occurred_on=occurred_at.date().isoformat(),
        )


__all__ = ["LedgerService", "OPENING_BALANCE_DESCRIPTION"]
