"""
Main Orchestrator for the Finance Tracker

This module ties together all the components and defines the
end-to-end flows for:
1. Initial Setup (drafts → accounts, investments, mirror transactions → save)
2. Data Management (export, import, clear)
3. Dashboard (snapshot → aggregation → report)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Only record stores mutate data, and every mutation is persisted
- The analytics engine only ever sees immutable snapshots
- Every multi-record action carries one correlation id in the audit trail

This is the "glue" that ensures the system works correctly
even when individual components might behave unexpectedly.
"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from finance_tracker.analytics import (
    build_analytics_report,
    build_dashboard_report,
    build_dashboard_summary,
    summarize_portfolio,
)
from finance_tracker.audit import AuditLogger, configure_logging, create_correlation_id
from finance_tracker.config import Settings, get_settings
from finance_tracker.models.finance import (
    Account,
    AccountDraft,
    AnalyticsReport,
    DashboardReport,
    DashboardSummary,
    DebtDraft,
    ExportSnapshot,
    Investment,
    InvestmentDraft,
    Period,
    PortfolioSummary,
    Transaction,
)
from finance_tracker.services.currency import CurrencyService
from finance_tracker.services.storage import (
    JsonFileStorage,
    KeyValueAuditStorage,
    KeyValueStorageInterface,
    LocalStorageService,
    RecordStore,
    SeedData,
    build_seed_data,
    build_setup_records,
)


@dataclass
class AppComponents:
    """Everything a front end needs, wired together."""

    settings: Settings
    currency_service: CurrencyService
    audit_logger: AuditLogger
    storage: LocalStorageService
    transactions: RecordStore[Transaction]
    investments: RecordStore[Investment]
    accounts: RecordStore[Account]
    setup_flow: "InitialSetupFlow"
    data_flow: "DataManagementFlow"
    dashboard_flow: "DashboardFlow"


class InitialSetupFlow:
    """
    Orchestrates the first-run setup.

    Flow:
    1. Collect account, debt and investment drafts
    2. Synthesize accounts, investments and mirror transactions
    3. Replace all three collections (and persist them)

    Mirror transactions are not linked to the records they came from.
    Editing an account later does not touch its "Initial Balance" entry.
    """

    def __init__(
        self,
        transactions: RecordStore[Transaction],
        investments: RecordStore[Investment],
        accounts: RecordStore[Account],
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._transactions = transactions
        self._investments = investments
        self._accounts = accounts
        self._audit_logger = audit_logger or AuditLogger()

    def complete(
        self,
        accounts: Sequence[AccountDraft],
        debts: Sequence[DebtDraft],
        investments: Sequence[InvestmentDraft],
        now: Optional[datetime] = None,
    ) -> SeedData:
        """
        Turn the drafts into records and make them the current data.

        Drafts without a name are skipped. Returns the records created.
        """
        correlation_id = create_correlation_id()
        records = build_setup_records(accounts, debts, investments, now=now)

        self._accounts.replace_all(records.accounts, correlation_id)
        self._investments.replace_all(records.investments, correlation_id)
        self._transactions.replace_all(records.transactions, correlation_id)

        self._audit_logger.log_setup_completed(
            accounts=len(records.accounts),
            investments=len(records.investments),
            transactions=len(records.transactions),
            correlation_id=correlation_id,
        )
        return records


class DataManagementFlow:
    """
    Orchestrates backup, restore and reset of all user data.

    The export document is the same shape the import accepts:
    {transactions, investments, accounts, exportDate}.
    """

    def __init__(
        self,
        storage: LocalStorageService,
        transactions: RecordStore[Transaction],
        investments: RecordStore[Investment],
        accounts: RecordStore[Account],
        export_prefix: str = "finance-backup",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._transactions = transactions
        self._investments = investments
        self._accounts = accounts
        self._export_prefix = export_prefix
        self._audit_logger = audit_logger or AuditLogger()

    def _record_count(self) -> int:
        return len(self._transactions) + len(self._investments) + len(self._accounts)

    def export_snapshot(self, now: Optional[datetime] = None) -> ExportSnapshot:
        return ExportSnapshot(
            transactions=list(self._transactions.list()),
            investments=list(self._investments.list()),
            accounts=list(self._accounts.list()),
            export_date=now or datetime.now(),
        )

    def export_json(self, now: Optional[datetime] = None) -> str:
        """Pretty-printed backup document."""
        snapshot = self.export_snapshot(now)
        return snapshot.model_dump_json(by_alias=True, indent=2)

    def write_export(self, directory: Path, now: Optional[datetime] = None) -> Path:
        """
        Write the backup document to `<directory>/<prefix>-YYYY-MM-DD.json`.

        Returns the path written.
        """
        now = now or datetime.now()
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        path = directory / f"{self._export_prefix}-{now.strftime('%Y-%m-%d')}.json"
        path.write_text(self.export_json(now), encoding="utf-8")

        self._audit_logger.log_data_exported(str(path), self._record_count())
        return path

    def import_json(self, text: str) -> ExportSnapshot:
        """
        Replace all data with the contents of a backup document.

        Raises:
            pydantic.ValidationError: If the document is not a valid backup.
                Nothing is replaced in that case and the rejection is logged.
        """
        try:
            snapshot = ExportSnapshot.model_validate_json(text)
        except ValidationError as e:
            self._audit_logger.log_error(
                "import_rejected",
                f"Backup document is invalid ({e.error_count()} errors)",
                details={"error_count": e.error_count()},
            )
            raise
        correlation_id = create_correlation_id()

        self._transactions.replace_all(snapshot.transactions, correlation_id)
        self._investments.replace_all(snapshot.investments, correlation_id)
        self._accounts.replace_all(snapshot.accounts, correlation_id)

        self._audit_logger.log_data_imported(self._record_count(), correlation_id)
        return snapshot

    def import_file(self, path: Path) -> ExportSnapshot:
        return self.import_json(Path(path).read_text(encoding="utf-8"))

    def clear_all_data(self) -> bool:
        """
        Remove stored data and reload the defaults into the stores.

        Returns False if storage could not be cleared; the stores are
        left untouched in that case.
        """
        if not self._storage.clear_all_data():
            return False

        self._transactions.replace_all(self._storage.get_transactions())
        self._investments.replace_all(self._storage.get_investments())
        self._accounts.replace_all(self._storage.get_accounts())

        self._audit_logger.log_data_cleared()
        return True


class DashboardFlow:
    """
    Builds the dashboard, analytics and portfolio views from current snapshots.

    Every call takes a fresh snapshot, so results always reflect the
    latest state of the stores.
    """

    def __init__(
        self,
        transactions: RecordStore[Transaction],
        investments: RecordStore[Investment],
        default_period: Period = Period.MONTHLY,
        dashboard_trend_months: int = 6,
        analytics_trend_months: int = 6,
    ):
        self._transactions = transactions
        self._investments = investments
        self._default_period = default_period
        self._dashboard_trend_months = dashboard_trend_months
        self._analytics_trend_months = analytics_trend_months

    def summary(self, now: Optional[datetime] = None) -> DashboardSummary:
        return build_dashboard_summary(self._transactions.list(), now=now)

    def dashboard(
        self,
        period: Optional[Period] = None,
        now: Optional[datetime] = None,
    ) -> DashboardReport:
        return build_dashboard_report(
            self._transactions.list(),
            period=period or self._default_period,
            trend_months=self._dashboard_trend_months,
            now=now,
        )

    def analytics(
        self,
        months: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> AnalyticsReport:
        return build_analytics_report(
            self._transactions.list(),
            time_range_months=months or self._analytics_trend_months,
            now=now,
        )

    def portfolio(self) -> PortfolioSummary:
        return summarize_portfolio(self._investments.list())


def create_app_components(
    backend: Optional[KeyValueStorageInterface] = None,
    settings: Optional[Settings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        backend: Key-value storage to use. Defaults to JSON files
                 in the configured data directory.
        settings: Settings to use. Defaults to the cached settings.

    Returns:
        AppComponents with stores loaded from storage
    """
    settings = settings or get_settings()
    storage_settings = settings.storage
    seed_settings = settings.seed
    app_settings = settings.app

    configure_logging(app_settings.log_level)

    if backend is None:
        backend = JsonFileStorage(storage_settings.data_dir)

    audit_logger = AuditLogger(
        KeyValueAuditStorage(
            backend,
            key=storage_settings.audit_key,
            max_events=storage_settings.audit_max_events,
        )
    )
    currency_service = CurrencyService(settings.currency.exchange_rates)

    storage = LocalStorageService(
        backend,
        settings=storage_settings,
        seed_provider=lambda: build_seed_data(seed_settings),
        audit_logger=audit_logger,
    )

    transactions = RecordStore(
        Transaction,
        "transaction",
        storage.get_transactions(),
        persist=storage.save_transactions,
        audit_logger=audit_logger,
    )
    investments = RecordStore(
        Investment,
        "investment",
        storage.get_investments(),
        persist=storage.save_investments,
        audit_logger=audit_logger,
    )
    accounts = RecordStore(
        Account,
        "account",
        storage.get_accounts(),
        persist=storage.save_accounts,
        audit_logger=audit_logger,
    )

    return AppComponents(
        settings=settings,
        currency_service=currency_service,
        audit_logger=audit_logger,
        storage=storage,
        transactions=transactions,
        investments=investments,
        accounts=accounts,
        setup_flow=InitialSetupFlow(
            transactions,
            investments,
            accounts,
            audit_logger=audit_logger,
        ),
        data_flow=DataManagementFlow(
            storage,
            transactions,
            investments,
            accounts,
            export_prefix=storage_settings.export_prefix,
            audit_logger=audit_logger,
        ),
        dashboard_flow=DashboardFlow(
            transactions,
            investments,
            default_period=app_settings.default_period,
            dashboard_trend_months=app_settings.dashboard_trend_months,
            analytics_trend_months=app_settings.analytics_trend_months,
        ),
    )
