"""
Inbound Voice Calls

Turns a finished inbound call into CRM records: find the caller's
account from the transcript, or open a new lead for them, then log
the call against it.
"""
from dataclasses import dataclass
from typing import Optional

from src.agents.lead_extractor_agent import LeadExtractorAgent
from src.api.models.vapi import VapiMessage
from src.models.account import Account, NewAccount
from src.models.call import CallRecord, NewCallRecord
from src.repositories.store import CRMStore
from src.utils.observability import logger

EMPTY_TRANSCRIPT = "(No transcript recorded)"
DEFAULT_SUMMARY = "Inbound call completed"


@dataclass
class InboundCallResult:
    account: Account
    call: CallRecord
    created_account: bool = False


def match_account(store: CRMStore, transcript: str) -> Optional[Account]:
    """First account whose company or contact name appears in the transcript."""
    lower = transcript.lower()
    if not lower:
        return None

    for account in store.get_accounts():
        names = (account.company.strip().lower(), account.contact_name.strip().lower())
        if any(name and name in lower for name in names):
            return account
    return None


class VoiceCallService:
    """
    Records end-of-call reports from the voice webhook.

    Usage:
        service = VoiceCallService(store, LeadExtractorAgent())
        result = await service.record_end_of_call(message)
    """

    def __init__(self, store: CRMStore, extractor: LeadExtractorAgent):
        self.store = store
        self.extractor = extractor

    async def resolve_account(self, transcript: str) -> tuple[Account, bool]:
        """
        Returns:
            (account, created) where created is True for a new lead
        """
        account = match_account(self.store, transcript)
        if account is not None:
            return account, False

        lead = await self.extractor.extract(transcript)
        account = self.store.create_account(
            NewAccount(
                company=lead.company,
                contact_name=lead.contact_name,
                contact_email=lead.contact_email,
                contact_role=lead.contact_role,
                industry=lead.industry,
                deal_value=lead.deal_value,
                notes=list(lead.notes),
            )
        )
        logger.info(f"📞 New inbound lead from voice call: {account.company}")
        return account, True

    async def record_end_of_call(self, message: VapiMessage) -> InboundCallResult:
        transcript = message.transcript or ""
        account, created = await self.resolve_account(transcript)

        call = self.store.add_call_record(
            account.id,
            NewCallRecord(
                account_id=account.id,
                duration=message.duration or 0,
                transcript=transcript or EMPTY_TRANSCRIPT,
                outcome=message.summary or DEFAULT_SUMMARY,
            )
        )

        logger.info(
            f"End-of-call logged for account {account.id}",
            extra={"call_id": call.id, "created_account": created}
        )
        return InboundCallResult(account=account, call=call, created_account=created)
