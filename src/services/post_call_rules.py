"""
Post-Call Rule Engine

Applies the pipeline's business rules to an account after a call:

    likelihood_blend → stage_adjustment → summary_note
        → tag_update → follow_up → risk_check

Rules run in that fixed order and each one reads the account as the
previous rule left it. Closed deals are never touched, and a call with
neither an analysis nor a sentiment score changes nothing.
"""
import datetime as dt
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from src.config import Settings, get_settings
from src.models.account import AT_RISK_TAG, OPEN_STAGES, Account, round_half_up
from src.models.analysis import CallAnalysis
from src.models.call import CallSentiment
from src.repositories.store import CRMStore
from src.utils.observability import log_business_event, logger

ENGAGED_TAG = "engaged"
HIGH_PRIORITY_TAG = "high-priority"

# Tag → words that trigger it when found in the call's pain points
PAIN_POINT_TAGS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("budget-concern", ("budget", "price", "cost")),
    ("compliance-blocker", ("compliance", "security", "legal")),
    ("urgent-timeline", ("timeline", "deadline", "urgent")),
)

NEGATIVE_SENTIMENT = 3   # At or below: regress and flag
POSITIVE_SENTIMENT = 8   # At or above: advance
WARM_SENTIMENT = 7       # At or above: short follow-up


@dataclass(frozen=True)
class PostCallSignal:
    """Everything the rules read from a finished call."""
    sentiment: Optional[int] = None
    likelihood_to_close: Optional[int] = None
    pain_points: Tuple[str, ...] = ()
    next_steps: Tuple[str, ...] = ()
    summary: Optional[str] = None
    outcome: Optional[str] = None
    has_analysis: bool = False

    @property
    def has_signal(self) -> bool:
        return self.has_analysis or self.sentiment is not None

    @classmethod
    def build(
        cls,
        analysis: Optional[CallAnalysis],
        call_sentiment: Optional[CallSentiment] = None,
        outcome: Optional[str] = None
    ) -> "PostCallSignal":
        """
        Merge a call analysis with the call's own score card.

        The analysis sentiment wins over the call's score; the analysis
        summary wins over the call outcome.
        """
        sentiment = analysis.overall_sentiment if analysis else None
        if sentiment is None and call_sentiment is not None:
            sentiment = call_sentiment.score

        summary = analysis.summary if analysis else None
        if summary is None:
            summary = outcome

        return cls(
            sentiment=sentiment,
            likelihood_to_close=analysis.likelihood_to_close if analysis else None,
            pain_points=tuple(analysis.pain_points or ()) if analysis else (),
            next_steps=tuple(analysis.next_steps or ()) if analysis else (),
            summary=summary,
            outcome=outcome,
            has_analysis=analysis is not None,
        )


@dataclass
class RuleContext:
    """State threaded through the rules for one call."""
    store: CRMStore
    account_id: str
    signal: PostCallSignal
    today: dt.date
    settings: Settings

    @property
    def account(self) -> Account:
        # Re-read on every access so each rule sees the latest state
        return self.store.require_account(self.account_id)


Rule = Callable[[RuleContext], bool]


def blend_likelihood(ctx: RuleContext) -> bool:
    """Blend the stored likelihood with the call's estimate."""
    call_likelihood = ctx.signal.likelihood_to_close
    if call_likelihood is None:
        return False

    blended = round_half_up(
        ctx.account.likelihood * ctx.settings.likelihood_history_weight
        + call_likelihood * ctx.settings.likelihood_call_weight
    )
    ctx.store.update_account_likelihood(ctx.account_id, blended)
    return True


def adjust_stage(ctx: RuleContext) -> bool:
    """Move one stage back on a bad call, one forward on a great one."""
    sentiment = ctx.signal.sentiment
    stage = ctx.account.stage
    if sentiment is None or stage not in OPEN_STAGES:
        return False

    index = OPEN_STAGES.index(stage)
    changed = False

    if sentiment <= NEGATIVE_SENTIMENT:
        if index > 0:
            ctx.store.update_account_stage(ctx.account_id, OPEN_STAGES[index - 1])
        ctx.store.flag_account_risk(
            ctx.account_id,
            f"Negative call — sentiment {sentiment}/10: {ctx.signal.outcome or 'poor engagement'}",
        )
        changed = True

    if sentiment >= POSITIVE_SENTIMENT and index < len(OPEN_STAGES) - 1:
        ctx.store.update_account_stage(ctx.account_id, OPEN_STAGES[index + 1])
        changed = True

    return changed


def append_summary_note(ctx: RuleContext) -> bool:
    summary = ctx.signal.summary
    if not summary:
        return False

    lines = [f"📞 Call summary: {summary}"]
    if ctx.signal.next_steps:
        lines.append(f"Next steps: {'; '.join(ctx.signal.next_steps[:3])}")

    ctx.store.add_note_to_account(ctx.account_id, " | ".join(lines))
    return True


def update_tags(ctx: RuleContext) -> bool:
    """Add and drop tags from sentiment, likelihood and pain-point keywords."""
    signal = ctx.signal
    to_add: List[str] = []
    to_remove: List[str] = []

    if signal.sentiment is not None:
        if signal.sentiment >= POSITIVE_SENTIMENT:
            to_add.append(ENGAGED_TAG)
            to_remove.append(AT_RISK_TAG)
        elif signal.sentiment <= NEGATIVE_SENTIMENT:
            to_add.append(AT_RISK_TAG)
            to_remove.append(ENGAGED_TAG)

    if (
        signal.likelihood_to_close is not None
        and signal.likelihood_to_close >= ctx.settings.high_priority_likelihood
    ):
        to_add.append(HIGH_PRIORITY_TAG)

    pain_text = " ".join(signal.pain_points).lower()
    if pain_text:
        for tag, keywords in PAIN_POINT_TAGS:
            if any(keyword in pain_text for keyword in keywords):
                to_add.append(tag)

    account = ctx.account
    changed = False
    for tag in to_add:
        changed = account.add_tag(tag) or changed
    for tag in to_remove:
        changed = account.remove_tag(tag) or changed
    return changed


def schedule_follow_up(ctx: RuleContext) -> bool:
    """Book the next touch: sooner after a warm call."""
    if not ctx.signal.next_steps:
        return False

    sentiment = ctx.signal.sentiment
    days = (
        ctx.settings.positive_followup_days
        if sentiment is not None and sentiment >= WARM_SENTIMENT
        else ctx.settings.default_followup_days
    )
    ctx.account.next_follow_up = ctx.today + dt.timedelta(days=days)
    return True


def check_risk(ctx: RuleContext) -> bool:
    """Flag accounts whose likelihood ended the call below the risk line."""
    account = ctx.account
    if account.likelihood >= ctx.settings.at_risk_likelihood_threshold or account.has_tag(AT_RISK_TAG):
        return False

    ctx.store.flag_account_risk(
        ctx.account_id,
        f"Likelihood dropped to {account.likelihood}% after call",
    )
    return True


POST_CALL_RULES: Tuple[Tuple[str, Rule], ...] = (
    ("likelihood_blend", blend_likelihood),
    ("stage_adjustment", adjust_stage),
    ("summary_note", append_summary_note),
    ("tag_update", update_tags),
    ("follow_up", schedule_follow_up),
    ("risk_check", check_risk),
)


@dataclass
class PostCallOutcome:
    """What the engine did for one call."""
    account_id: str
    applied_rules: List[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


class PostCallRuleEngine:
    """
    Runs POST_CALL_RULES against one account.

    Usage:
        engine = PostCallRuleEngine(store)
        signal = PostCallSignal.build(analysis, call.sentiment, outcome)
        outcome = engine.apply(account_id, signal)
        print(outcome.applied_rules)
    """

    def __init__(
        self,
        store: CRMStore,
        rules: Tuple[Tuple[str, Rule], ...] = POST_CALL_RULES,
        settings: Settings | None = None
    ):
        self.store = store
        self.rules = rules
        self.settings = settings or get_settings()

    def apply(
        self,
        account_id: str,
        signal: PostCallSignal,
        today: dt.date | None = None
    ) -> PostCallOutcome:
        """
        Apply every rule in order and persist the result.

        Args:
            account_id: Account the call belongs to
            signal: Merged call analysis
            today: Reference date for follow-ups (default: today, UTC)

        Returns:
            PostCallOutcome naming the rules that changed the account
        """
        outcome = PostCallOutcome(account_id=account_id)

        account = self.store.get_account(account_id)
        if account is None:
            outcome.skipped_reason = "account_not_found"
        elif account.stage.is_terminal:
            outcome.skipped_reason = f"terminal_stage:{account.stage.value}"
        elif not signal.has_signal:
            outcome.skipped_reason = "no_signal"

        if outcome.skipped:
            logger.debug(
                f"Post-call rules skipped for {account_id}: {outcome.skipped_reason}"
            )
            return outcome

        ctx = RuleContext(
            store=self.store,
            account_id=account_id,
            signal=signal,
            today=today or dt.datetime.now(dt.UTC).date(),
            settings=self.settings,
        )

        for name, rule in self.rules:
            if rule(ctx):
                outcome.applied_rules.append(name)

        # Tag and follow-up changes bypass the store's mutators
        self.store.persist()

        log_business_event(
            "post_call_rules_applied",
            account_id,
            rules=outcome.applied_rules,
            sentiment=signal.sentiment,
            likelihood_to_close=signal.likelihood_to_close,
        )
        return outcome
