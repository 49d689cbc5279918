"""
CRM Store
Authoritative in-memory state for accounts, calls and activities,
persisted as a whole-store snapshot after every mutation.
"""
import datetime as dt
import itertools
import time
from typing import List, Optional

from pydantic import ValidationError

from ..config import get_settings
from ..models.account import AT_RISK_TAG, Account, NewAccount, Plan, Stage, clamp_likelihood
from ..models.activity import Activity, ActivityType
from ..models.base import utc_now
from ..models.call import CallRecord, NewCallRecord
from ..utils.observability import log_business_event, logger
from .seed import build_seed
from .snapshot import SnapshotFile, StoreSnapshot

# Left behind in activity messages by an old stage-change bug
CORRUPT_ACTIVITY_MARKER = "→ undefined"


class CRMError(Exception):
    """Base class for CRM lookups and validation failures."""
    pass


class AccountNotFoundError(CRMError):
    """Raised when an account id or company name matches nothing."""

    def __init__(self, lookup: str):
        self.lookup = lookup
        super().__init__(f'Account "{lookup}" not found')


class CRMStore:
    """
    Single-writer CRM state with snapshot persistence.

    Every mutating method rewrites the whole snapshot before returning.
    A failed write is logged and the in-memory change stands.
    There is no locking: concurrent writers are last-write-wins.

    Usage:
        store = CRMStore(SnapshotFile(settings.snapshot_path))
        store.load()
        account = store.get_account_by_company("meridian")
        store.update_account_stage(account.id, Stage.PROPOSAL)
    """

    def __init__(self, snapshot: SnapshotFile):
        self.snapshot = snapshot
        self.accounts: List[Account] = []
        self.call_records: List[CallRecord] = []
        self.activities: List[Activity] = []
        self.loaded = False
        self._ids = itertools.count(int(time.time() * 1000) + 1)

    # ============================================
    # LIFECYCLE
    # ============================================

    def load(self) -> None:
        """
        Populate the store from the snapshot file, or from the seed
        dataset when no usable snapshot exists.
        """
        restored = self._read_snapshot()

        if restored is not None:
            self.accounts = restored.accounts
            self.call_records = restored.call_records
            self.activities = restored.activities
            logger.info(
                f"Loaded CRM snapshot from {self.snapshot.path}",
                extra={
                    "accounts": len(self.accounts),
                    "calls": len(self.call_records),
                    "activities": len(self.activities),
                }
            )
        else:
            self.accounts, self.call_records, self.activities = build_seed()
            logger.info("Seeded CRM store with demo pipeline")

        self.loaded = True

    def _read_snapshot(self) -> Optional[StoreSnapshot]:
        try:
            raw = self.snapshot.read()
            if not raw or not raw.get("accounts"):
                return None

            valid_stages = {stage.value for stage in Stage}
            for account in raw["accounts"]:
                if not isinstance(account, dict):
                    continue
                stage = account.get("stage")
                if not (isinstance(stage, str) and stage in valid_stages):
                    logger.warning(
                        f'Account "{account.get("company")}" had invalid stage '
                        f'"{stage}", resetting to "lead"'
                    )
                    account["stage"] = Stage.LEAD.value

            raw["activities"] = [
                activity for activity in raw.get("activities") or []
                if not isinstance(activity, dict)
                or CORRUPT_ACTIVITY_MARKER not in str(activity.get("message", ""))
            ]

            return StoreSnapshot.model_validate(raw)

        except (OSError, ValueError, TypeError, AttributeError, ValidationError) as e:
            logger.warning(f"Failed to load CRM snapshot, using seed data: {e}")
            return None

    def persist(self) -> bool:
        """
        Rewrite the snapshot with the current state.

        Returns:
            True if written, False if the write failed (already logged)
        """
        try:
            self.snapshot.write(
                StoreSnapshot(
                    accounts=self.accounts,
                    call_records=self.call_records,
                    activities=self.activities,
                )
            )
            return True
        except OSError as e:
            logger.warning(f"Failed to persist CRM snapshot: {e}")
            return False

    def new_id(self) -> str:
        return f"s-{next(self._ids)}"

    # ============================================
    # QUERIES
    # ============================================

    def get_accounts(self) -> List[Account]:
        return self.accounts

    def get_account(self, account_id: str) -> Optional[Account]:
        return next((a for a in self.accounts if a.id == account_id), None)

    def get_account_by_company(self, name: str) -> Optional[Account]:
        """
        Find an account by company name, case-insensitively.
        An exact match wins over a partial one; blank names match nothing.
        """
        lower = (name or "").strip().lower()
        if not lower:
            return None

        exact = next((a for a in self.accounts if a.company.lower() == lower), None)
        if exact:
            return exact
        return next((a for a in self.accounts if lower in a.company.lower()), None)

    def require_account(self, account_id: str) -> Account:
        account = self.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def get_calls_by_account(self, account_id: str) -> List[CallRecord]:
        return [c for c in self.call_records if c.account_id == account_id]

    def get_all_calls(self) -> List[CallRecord]:
        return self.call_records

    def get_activities_by_account(self, account_id: str) -> List[Activity]:
        """Activities for one account, newest first."""
        return sorted(
            (a for a in self.activities if a.account_id == account_id),
            key=lambda a: a.timestamp,
            reverse=True,
        )

    def get_recent_activities(self, limit: int) -> List[Activity]:
        """The `limit` newest activities across all accounts."""
        return sorted(self.activities, key=lambda a: a.timestamp, reverse=True)[:limit]

    # ============================================
    # MUTATIONS
    # ============================================

    def _append_activity(
        self,
        account_id: str,
        activity_type: ActivityType,
        message: str,
        timestamp: Optional[dt.datetime] = None
    ) -> Activity:
        activity = Activity(
            id=self.new_id(),
            account_id=account_id,
            type=activity_type,
            message=message,
            timestamp=timestamp or utc_now(),
        )
        self.activities.append(activity)
        return activity

    def create_account(self, data: NewAccount) -> Account:
        """
        Open a new inbound lead.

        The account starts at stage lead with the default likelihood,
        the "inbound" tag and a follow-up a few days out.
        """
        settings = get_settings()
        now = utc_now()

        account = Account(
            id=self.new_id(),
            company=data.company,
            contact_name=data.contact_name,
            contact_email=data.contact_email,
            contact_role=data.contact_role,
            plan=Plan.FREE,
            stage=Stage.LEAD,
            deal_value=data.deal_value,
            likelihood=settings.new_account_likelihood,
            industry=data.industry,
            notes=list(data.notes),
            last_contact_date=now,
            next_follow_up=(now + dt.timedelta(days=settings.new_account_followup_days)).date(),
            tags=["inbound"],
        )
        self.accounts.append(account)

        self._append_activity(
            account.id,
            ActivityType.NOTE,
            f"New inbound lead: {data.company} — {data.contact_name} ({data.contact_role})",
            now,
        )

        log_business_event("account_created", account.id, company=account.company)
        self.persist()
        return account

    def update_account_stage(self, account_id: str, stage: Stage) -> Optional[Account]:
        """
        Move an account to another stage.

        Returns None for an unknown account. Moving to the current
        stage changes nothing and writes no activity.
        """
        account = self.get_account(account_id)
        if account is None:
            return None

        new_stage = Stage.normalize(stage)
        if new_stage is None:
            logger.warning(f'Invalid stage "{stage}" — ignoring')
            return account

        if account.stage == new_stage:
            return account

        old_stage = account.stage
        account.stage = new_stage

        self._append_activity(
            account_id,
            ActivityType.STAGE_CHANGE,
            f"Stage changed from {old_stage.label} → {new_stage.label}",
        )

        log_business_event(
            "stage_transition",
            account_id,
            from_stage=old_stage.value,
            to_stage=new_stage.value
        )
        self.persist()
        return account

    def update_account_likelihood(self, account_id: str, likelihood: float) -> Optional[Account]:
        """Set the close likelihood, clamped into [0, 100]."""
        account = self.get_account(account_id)
        if account is None:
            return None

        account.likelihood = clamp_likelihood(likelihood)
        self.persist()
        return account

    def add_note_to_account(self, account_id: str, note: str) -> Optional[Account]:
        account = self.get_account(account_id)
        if account is None:
            return None

        account.notes.append(note)
        self._append_activity(account_id, ActivityType.NOTE, note)

        self.persist()
        return account

    def add_call_record(self, account_id: str, record: NewCallRecord) -> CallRecord:
        """
        Record a completed call against an existing account.

        Raises:
            AccountNotFoundError: If the account does not exist
        """
        account = self.require_account(account_id)

        call = CallRecord(
            id=self.new_id(),
            account_id=account_id,
            date=record.date,
            duration=record.duration,
            transcript=record.transcript,
            sentiment=record.sentiment,
            outcome=record.outcome,
        )
        self.call_records.append(call)
        account.last_contact_date = call.date

        self._append_activity(
            account_id,
            ActivityType.CALL,
            f"Call recorded — {call.outcome} ({call.duration_minutes} min)",
            call.date,
        )

        log_business_event("call_recorded", account_id, call_id=call.id, duration=call.duration)
        self.persist()
        return call

    def add_activity(
        self,
        account_id: str,
        activity_type: ActivityType,
        message: str,
        timestamp: Optional[dt.datetime] = None
    ) -> Activity:
        activity = self._append_activity(account_id, activity_type, message, timestamp)
        self.persist()
        return activity

    def delete_account(self, account_id: str) -> bool:
        account = self.get_account(account_id)
        if account is None:
            return False

        self.accounts.remove(account)
        self.persist()
        return True

    def flag_account_risk(self, account_id: str, reason: str) -> Optional[Account]:
        """
        Mark an account at-risk.

        The tag is added at most once; the explanatory note is appended
        on every call, even when the same reason repeats.
        """
        account = self.get_account(account_id)
        if account is None:
            return None

        account.add_tag(AT_RISK_TAG)
        self.add_note_to_account(account_id, f"⚠️ AT-RISK: {reason}")

        log_business_event("risk_flagged", account_id, reason=reason)
        return account
