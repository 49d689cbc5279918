"""
CRM Action Handler

Executes the commands posted to /api/crm against the store.

Each handler returns the JSON-ready response body. Lookup failures raise
AccountNotFoundError and bad stage names raise InvalidStageError; the
route turns both into the error envelope.
"""
import datetime as dt
from typing import Any, Dict

from src.api.models.crm_actions import (
    AddCallCommand,
    AddNoteCommand,
    AnyCRMCommand,
    CreateAccountCommand,
    FlagRiskCommand,
    GetAccountBriefCommand,
    MoveStageCommand,
    UpdateLikelihoodCommand,
)
from src.config import Settings, get_settings
from src.models.account import Account, NewAccount, Stage
from src.models.base import utc_now
from src.models.call import NewCallRecord
from src.repositories.store import AccountNotFoundError, CRMError, CRMStore
from src.services.post_call_rules import PostCallRuleEngine, PostCallSignal
from src.utils.observability import logger


class InvalidStageError(CRMError):
    """Raised when a stage name does not normalize to a known stage."""

    def __init__(self, raw: Any):
        self.raw = raw
        super().__init__(f"Invalid stage: {raw}")


class CRMActionHandler:
    """
    Dispatches CRM commands by type.

    Usage:
        handler = CRMActionHandler(store, PostCallRuleEngine(store))
        body = handler.handle(MoveStageCommand(action="moveStage", company_name="Meridian", stage="proposal"))
    """

    def __init__(self, store: CRMStore, engine: PostCallRuleEngine, settings: Settings | None = None):
        self.store = store
        self.engine = engine
        self.settings = settings or get_settings()

    def _find_by_company(self, company_name: str) -> Account:
        account = self.store.get_account_by_company(company_name)
        if account is None:
            raise AccountNotFoundError(company_name)
        return account

    def handle(self, command: AnyCRMCommand) -> Dict[str, Any]:
        """
        Run one command and return the response body.

        Raises:
            AccountNotFoundError: If the referenced account does not exist
            InvalidStageError: If a moveStage names an unknown stage
        """
        logger.debug(f"CRM action: {command.action}")

        match command:
            case MoveStageCommand():
                return self._move_stage(command)
            case AddNoteCommand():
                return self._add_note(command)
            case GetAccountBriefCommand():
                return self._account_brief(command)
            case UpdateLikelihoodCommand():
                return self._update_likelihood(command)
            case FlagRiskCommand():
                return self._flag_risk(command)
            case AddCallCommand():
                return self._add_call(command)
            case CreateAccountCommand():
                return self._create_account(command)

    def _move_stage(self, command: MoveStageCommand) -> Dict[str, Any]:
        if command.account_id:
            account = self.store.get_account(command.account_id)
        else:
            account = self.store.get_account_by_company(command.company_name or "")
        if account is None:
            raise AccountNotFoundError(command.account_id or command.company_name or "")

        stage = Stage.normalize(command.stage)
        if stage is None:
            raise InvalidStageError(command.stage)

        self.store.update_account_stage(account.id, stage)
        return {
            "ok": True,
            "message": f"✅ Moved {account.company} to {stage.label}",
            "account": account.to_payload(),
        }

    def _add_note(self, command: AddNoteCommand) -> Dict[str, Any]:
        account = self._find_by_company(command.company_name)
        self.store.add_note_to_account(account.id, command.note)
        return {"ok": True, "message": f"📝 Note added to {account.company}"}

    def _account_brief(self, command: GetAccountBriefCommand) -> Dict[str, Any]:
        account = self._find_by_company(command.company_name)
        activities = self.store.get_activities_by_account(account.id)
        return {
            "account": account.to_payload(),
            "calls": [c.to_payload() for c in self.store.get_calls_by_account(account.id)],
            "activities": [
                a.to_payload()
                for a in activities[:self.settings.account_brief_activity_limit]
            ],
        }

    def _update_likelihood(self, command: UpdateLikelihoodCommand) -> Dict[str, Any]:
        account = self._find_by_company(command.company_name)
        old = account.likelihood
        self.store.update_account_likelihood(account.id, command.likelihood)
        return {
            "ok": True,
            "company": account.company,
            "old": old,
            "now": account.likelihood,
        }

    def _flag_risk(self, command: FlagRiskCommand) -> Dict[str, Any]:
        account = self._find_by_company(command.company_name)
        self.store.flag_account_risk(account.id, command.reason)
        return {"ok": True, "company": account.company, "reason": command.reason}

    def _add_call(self, command: AddCallCommand) -> Dict[str, Any]:
        record = NewCallRecord(
            account_id=command.account_id,
            date=command.date or utc_now(),
            duration=command.duration,
            transcript=command.transcript,
            sentiment=command.sentiment,
            outcome=command.outcome or "Call completed",
        )
        call = self.store.add_call_record(command.account_id, record)

        signal = PostCallSignal.build(command.analysis, command.sentiment, command.outcome)
        outcome = self.engine.apply(command.account_id, signal, today=dt.datetime.now(dt.UTC).date())

        logger.info(
            f"Call {call.id} recorded for {command.account_id}",
            extra={"rules": outcome.applied_rules, "skipped": outcome.skipped_reason}
        )
        return {"ok": True, "callId": call.id}

    def _create_account(self, command: CreateAccountCommand) -> Dict[str, Any]:
        account = self.store.create_account(
            NewAccount(
                company=command.company,
                contact_name=command.contact_name,
                contact_email=command.contact_email,
                contact_role=command.contact_role,
                industry=command.industry or self.settings.new_account_industry,
                deal_value=command.deal_value or self.settings.new_account_deal_value,
                notes=command.notes,
            )
        )
        return {"ok": True, "account": account.to_payload()}
