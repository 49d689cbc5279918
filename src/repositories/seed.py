"""
Seed Dataset
Demo pipeline loaded on first run, before any snapshot exists.
Dates are relative to the moment the store is seeded.
"""
import datetime as dt
from typing import List, Optional, Tuple

from ..models.account import Account, Plan, Stage
from ..models.activity import Activity, ActivityType
from ..models.base import utc_now
from ..models.call import CallRecord, CallSentiment


def _days_ago(now: dt.datetime, days: int) -> dt.datetime:
    return now - dt.timedelta(days=days)


def _seed_accounts(now: dt.datetime) -> List[Account]:
    def follow_up(days: Optional[int]) -> Optional[dt.date]:
        return None if days is None else (now + dt.timedelta(days=days)).date()

    return [
        Account(
            id="acc-1",
            company="Meridian Health",
            contact_name="Dr. Sarah Chen",
            contact_email="s.chen@meridianhealth.com",
            contact_role="VP of Engineering",
            plan=Plan.ENTERPRISE,
            stage=Stage.NEGOTIATION,
            deal_value=240_000,
            likelihood=62,
            industry="Healthcare",
            notes=[
                "200-person dev team, heavily regulated environment.",
                "Main blocker: HIPAA compliance review — legal wants SOC 2 Type II report.",
                "Sarah is an internal champion but needs sign-off from CISO.",
            ],
            last_contact_date=_days_ago(now, 1),
            next_follow_up=follow_up(2),
            tags=["enterprise"],
        ),
        Account(
            id="acc-2",
            company="NovaPay Technologies",
            contact_name="Marcus Rivera",
            contact_email="marcus@novapay.io",
            contact_role="CTO",
            plan=Plan.TEAM,
            stage=Stage.PROPOSAL,
            deal_value=96_000,
            likelihood=78,
            industry="Fintech",
            notes=[
                "Series C, 80 devs. Moving fast — wants to close this quarter.",
                "Loved the demo; specifically asked about real-time collaboration features.",
                "Needs a custom SSO integration — scoped at ~2 weeks eng time.",
            ],
            last_contact_date=_days_ago(now, 3),
            next_follow_up=follow_up(5),
            tags=["high-priority"],
        ),
        Account(
            id="acc-3",
            company="BrightLoop Education",
            contact_name="Priya Sharma",
            contact_email="priya@brightloop.edu",
            contact_role="Head of Product",
            plan=Plan.TEAM,
            stage=Stage.DISCOVERY,
            deal_value=24_000,
            likelihood=85,
            industry="EdTech",
            notes=[
                "Small team (20 devs) but incredibly enthusiastic.",
                "Already prototyped an integration over a weekend hackathon.",
                "Budget is tight — may need a discount or phased rollout.",
            ],
            last_contact_date=_days_ago(now, 2),
            next_follow_up=follow_up(7),
            tags=[],
        ),
        Account(
            id="acc-4",
            company="Atlas Logistics",
            contact_name="Tom Barrett",
            contact_email="tbarrett@atlaslogistics.com",
            contact_role="Director of IT",
            plan=Plan.ENTERPRISE,
            stage=Stage.LEAD,
            deal_value=144_000,
            likelihood=35,
            industry="Supply Chain",
            notes=[
                "60-person dev org. Cold outreach — responded to a LinkedIn message.",
                "Barely engaged. Took two weeks to schedule an intro call.",
                "Legacy stack (Java monolith) — integration could be painful.",
            ],
            last_contact_date=_days_ago(now, 14),
            next_follow_up=follow_up(3),
            tags=["at-risk"],
        ),
        Account(
            id="acc-5",
            company="Vertex AI Labs",
            contact_name="Lena Kowalski",
            contact_email="lena@vertexailabs.com",
            contact_role="CEO",
            plan=Plan.TEAM,
            stage=Stage.CLOSED_WON,
            deal_value=54_000,
            likelihood=100,
            industry="AI / ML Tools",
            notes=[
                "45 devs. Signed 6 months ago — our happiest customer.",
                "Using the platform daily for their internal AI workflows.",
                "Expansion conversation started — looking at enterprise tier.",
            ],
            last_contact_date=_days_ago(now, 5),
            next_follow_up=None,
            tags=[],
        ),
        Account(
            id="acc-6",
            company="Cascade Financial",
            contact_name="James Whitfield",
            contact_email="j.whitfield@cascadefinancial.com",
            contact_role="SVP of Digital Transformation",
            plan=Plan.ENTERPRISE,
            stage=Stage.PROPOSAL,
            deal_value=360_000,
            likelihood=50,
            industry="Banking / Finance",
            notes=[
                "Fortune 500 bank, 300-person engineering org.",
                "Long sales cycle — currently in legal and procurement review.",
                "Need to satisfy their vendor security questionnaire (150+ questions).",
                "James is enthusiastic but has limited influence over legal timeline.",
            ],
            last_contact_date=_days_ago(now, 4),
            next_follow_up=follow_up(10),
            tags=["enterprise", "high-priority"],
        ),
    ]


# (id, account, days ago, seconds, transcript lines, (score, satisfaction, summary, tags), outcome)
_CALLS: List[Tuple[str, str, int, int, List[str], Tuple[int, int, str, List[str]], str]] = [
    (
        "call-1", "acc-1", 1, 1260,
        [
            "Sarah: We're really interested, but our CISO needs the SOC 2 Type II report before he'll sign off.",
            "Rep: Absolutely — I'll have our security team send that over today.",
            "Sarah: Great. Also, can we get a data residency guarantee? Patient data can't leave US-East.",
            "Rep: Yes, we support region-locked deployments. I'll include that in the proposal addendum.",
            "Sarah: Perfect. Let's aim to get this wrapped up by end of month if possible.",
        ],
        (7, 8, "Positive intent but blocked by compliance. Needs security docs ASAP.",
         ["compliance", "urgent-blocker", "engaged"]),
        "Sending SOC 2 report and data residency addendum",
    ),
    (
        "call-2", "acc-1", 8, 900,
        [
            "Sarah: We ran a proof-of-concept last week and the team loved it.",
            "Rep: That's great to hear. Any issues come up during the POC?",
            "Sarah: Minor thing — the audit logging wasn't granular enough for our compliance team.",
            "Rep: Got it. We can configure custom audit events — I'll set up a technical session.",
        ],
        (8, 7, "POC went well. Minor audit logging concern being addressed.",
         ["poc-success", "compliance", "technical-follow-up"]),
        "Scheduled technical deep-dive on audit logging",
    ),
    (
        "call-3", "acc-2", 3, 1080,
        [
            "Marcus: The pricing looks good. Can you do annual billing with a 10% discount?",
            "Rep: We can offer 15% on a 2-year commitment, or 10% on annual. Let me draft both options.",
            "Marcus: 2-year is aggressive for us, but I'll float it to the board. The 10% annual is probably our sweet spot.",
            "Rep: I'll send the proposal with both scenarios by EOD.",
        ],
        (9, 9, "Very engaged, negotiating pricing. Close to signing.",
         ["pricing", "high-intent", "board-approval"]),
        "Sending dual pricing proposal (annual vs 2-year)",
    ),
    (
        "call-4", "acc-2", 10, 720,
        [
            "Marcus: Your real-time collab feature — does it work with our existing WebSocket infra?",
            "Rep: Yes, we support custom transport layers. I can share our integration guide.",
            "Marcus: That'd be great. Our team is already excited about this.",
        ],
        (8, 9, "Technical validation going well. Team already bought in.",
         ["technical", "positive"]),
        "Shared WebSocket integration guide",
    ),
    (
        "call-5", "acc-2", 18, 540,
        [
            "Marcus: We're evaluating three vendors. What makes you different from Competitor X?",
            "Rep: Two things — our developer experience is significantly better, and we're the only one with native AI copilot support.",
            "Marcus: The AI angle is interesting. Can you show me a demo focused on that?",
        ],
        (7, 7, "Competitive eval phase. AI copilot feature is the differentiator.",
         ["competitive", "demo-request"]),
        "Scheduled AI copilot-focused demo",
    ),
    (
        "call-6", "acc-3", 2, 660,
        [
            "Priya: We built a prototype over the weekend and it already works better than our current tool.",
            "Rep: That's amazing. What did you build?",
            "Priya: A collaborative lesson planner with AI suggestions. Teachers are loving it.",
            "Rep: I'd love to feature that as a case study if you're open to it.",
        ],
        (9, 10, "Extremely enthusiastic. Already built a working prototype.",
         ["champion", "case-study-potential", "fast-mover"]),
        "Discussing case study opportunity",
    ),
    (
        "call-7", "acc-3", 12, 480,
        [
            "Priya: Our budget is limited — is there a startup discount?",
            "Rep: We have a startup program that offers 30% off the first year.",
            "Priya: That would work! Can you send me the application details?",
        ],
        (7, 8, "Budget constrained but very willing. Startup program could close the deal.",
         ["budget", "startup-program"]),
        "Sending startup program application",
    ),
    (
        "call-8", "acc-4", 14, 420,
        [
            "Tom: Look, I'll be honest — we're not actively looking to switch tools right now.",
            "Rep: Totally understand. What prompted you to take the call?",
            "Tom: Our CTO mentioned you at a conference. I'm just doing due diligence.",
            "Rep: Makes sense. Let me send some materials and we can reconnect when timing is better.",
        ],
        (4, 5, "Low urgency. Taking the call out of obligation, not intent.",
         ["low-intent", "due-diligence", "cto-referral"]),
        "Sent overview materials; will follow up in 2 weeks",
    ),
    (
        "call-9", "acc-4", 21, 300,
        [
            "Rep: Hi Tom, thanks for connecting on LinkedIn. Would love to show you how we help logistics companies.",
            "Tom: Sure, keep it brief. We've got a lot on our plate.",
            "Rep: Understood. I'll send a 5-minute overview video instead of a full demo.",
        ],
        (3, 4, "Cold outreach. Barely engaged. Prefers async communication.",
         ["cold", "low-engagement"]),
        "Sent 5-minute product overview video",
    ),
    (
        "call-10", "acc-5", 5, 1320,
        [
            "Lena: We've been using the platform for 6 months now and the team can't imagine going back.",
            "Rep: That's so great to hear. Any feature requests on your wishlist?",
            "Lena: Multi-tenant workspace support. We're scaling and need better isolation between projects.",
            "Rep: That's on our Q2 roadmap actually. Would you be open to being a design partner?",
            "Lena: Absolutely. Also, we're looking at the enterprise tier for some of our larger clients.",
        ],
        (10, 10, "Thrilled customer. Expansion opportunity to enterprise tier.",
         ["happy-customer", "expansion", "design-partner"]),
        "Setting up enterprise tier evaluation + design partnership",
    ),
    (
        "call-11", "acc-5", 30, 780,
        [
            "Lena: Usage is up 40% month-over-month since we onboarded.",
            "Rep: Incredible growth. Are you hitting any scale issues?",
            "Lena: Nothing major. The API rate limits could be higher for our batch jobs though.",
        ],
        (9, 9, "Strong adoption metrics. Minor request for higher rate limits.",
         ["growth", "rate-limits"]),
        "Submitted rate limit increase request",
    ),
    (
        "call-12", "acc-6", 4, 1500,
        [
            "James: Legal is going through the vendor security questionnaire. It's 150 questions.",
            "Rep: We've pre-filled most of it from our last Fortune 500 deal. I'll send you the completed version.",
            "James: That'll save us weeks. The procurement team also needs a W-9 and insurance certificate.",
            "Rep: Both are ready — I'll include them in the same package.",
            "James: Great. I'm pushing for a Q1 close but legal moves at their own pace here.",
        ],
        (6, 7, "Willing champion but constrained by slow legal/procurement process.",
         ["legal-review", "procurement", "long-cycle"]),
        "Sending pre-filled security questionnaire + W-9 + insurance cert",
    ),
    (
        "call-13", "acc-6", 15, 1080,
        [
            "James: We had 12 people on the demo and everyone was impressed.",
            "Rep: Great turnout. Were there any concerns from the group?",
            "James: A few questions about disaster recovery and SLA guarantees. Can you formalize those?",
            "Rep: Absolutely. I'll prepare a custom SLA document for your team.",
        ],
        (7, 8, "Strong group demo reception. SLA documentation needed to move forward.",
         ["group-demo", "sla", "positive"]),
        "Preparing custom SLA document",
    ),
    (
        "call-14", "acc-6", 25, 600,
        [
            "James: I've been looking at your competitors. Your pricing is higher but the feature set is stronger.",
            "Rep: We find that enterprise clients recoup the difference in the first quarter through productivity gains.",
            "James: I believe that. I need hard numbers for the CFO though.",
        ],
        (6, 6, "Sees value but needs ROI data for CFO sign-off.",
         ["competitive", "roi", "cfo-sign-off"]),
        "Preparing ROI analysis and case study package",
    ),
]


# (id, account, type, message, days ago)
_ACTIVITIES: List[Tuple[str, str, ActivityType, str, int]] = [
    ("act-1", "acc-1", ActivityType.STAGE_CHANGE, "Stage changed from Proposal → Negotiation", 7),
    ("act-2", "acc-1", ActivityType.EMAIL, "Sent SOC 2 Type II report to Sarah Chen", 1),
    ("act-3", "acc-1", ActivityType.CALL, "Call with Sarah Chen — discussed compliance blockers (21 min)", 1),
    ("act-4", "acc-1", ActivityType.NOTE, "CISO review expected by end of week. Sarah confident it will pass.", 1),
    ("act-5", "acc-1", ActivityType.CALL, "Call with Sarah Chen — POC feedback, audit logging concerns (15 min)", 8),
    ("act-6", "acc-1", ActivityType.MEETING, "Technical deep-dive on audit logging with Meridian security team", 5),
    ("act-7", "acc-2", ActivityType.CALL, "Call with Marcus Rivera — pricing negotiation (18 min)", 3),
    ("act-8", "acc-2", ActivityType.EMAIL, "Sent dual pricing proposal (annual vs 2-year commitment)", 3),
    ("act-9", "acc-2", ActivityType.CALL, "Call with Marcus Rivera — WebSocket integration questions (12 min)", 10),
    ("act-10", "acc-2", ActivityType.STAGE_CHANGE, "Stage changed from Discovery → Proposal", 8),
    ("act-11", "acc-2", ActivityType.CALL, "Call with Marcus Rivera — competitive eval, AI demo request (9 min)", 18),
    ("act-12", "acc-2", ActivityType.MEETING, "AI Copilot-focused demo for NovaPay engineering team", 14),
    ("act-13", "acc-3", ActivityType.CALL, "Call with Priya Sharma — prototype review, case study discussion (11 min)", 2),
    ("act-14", "acc-3", ActivityType.EMAIL, "Sent startup program application to Priya", 10),
    ("act-15", "acc-3", ActivityType.CALL, "Call with Priya Sharma — budget discussion, startup discount (8 min)", 12),
    ("act-16", "acc-3", ActivityType.NOTE, "Priya's team built a lesson planner prototype in one weekend. Strong champion.", 2),
    ("act-17", "acc-3", ActivityType.STAGE_CHANGE, "Stage changed from Lead → Discovery", 15),
    ("act-18", "acc-4", ActivityType.CALL, "Call with Tom Barrett — intro call, low urgency (7 min)", 14),
    ("act-19", "acc-4", ActivityType.EMAIL, "Sent product overview materials to Tom", 14),
    ("act-20", "acc-4", ActivityType.CALL, "Cold outreach call via LinkedIn connection (5 min)", 21),
    ("act-21", "acc-4", ActivityType.EMAIL, "Sent 5-minute product overview video", 21),
    ("act-22", "acc-4", ActivityType.NOTE, "Very low engagement. CTO referral is only leverage point. Consider deprioritizing.", 13),
    ("act-23", "acc-5", ActivityType.CALL, "Call with Lena Kowalski — expansion discussion, enterprise tier (22 min)", 5),
    ("act-24", "acc-5", ActivityType.NOTE, "Lena agreed to be a design partner for multi-tenant workspaces.", 5),
    ("act-25", "acc-5", ActivityType.CALL, "Call with Lena Kowalski — usage review, rate limit request (13 min)", 30),
    ("act-26", "acc-5", ActivityType.EMAIL, "Submitted internal request to increase API rate limits for Vertex", 28),
    ("act-27", "acc-5", ActivityType.STAGE_CHANGE, "Deal closed — Vertex AI Labs signed annual contract", 180),
    ("act-28", "acc-6", ActivityType.CALL, "Call with James Whitfield — security questionnaire logistics (25 min)", 4),
    ("act-29", "acc-6", ActivityType.EMAIL, "Sent pre-filled security questionnaire + W-9 + insurance certificate", 4),
    ("act-30", "acc-6", ActivityType.CALL, "Call with James Whitfield — group demo follow-up (18 min)", 15),
    ("act-31", "acc-6", ActivityType.MEETING, "Group demo for Cascade Financial — 12 attendees", 16),
    ("act-32", "acc-6", ActivityType.CALL, "Call with James Whitfield — competitive positioning, ROI ask (10 min)", 25),
    ("act-33", "acc-6", ActivityType.STAGE_CHANGE, "Stage changed from Discovery → Proposal", 20),
]


def build_seed(
    now: Optional[dt.datetime] = None
) -> Tuple[List[Account], List[CallRecord], List[Activity]]:
    """
    Build fresh copies of the demo accounts, calls and activities.

    Args:
        now: Reference time for the relative dates (default: current UTC time)

    Returns:
        (accounts, call_records, activities)
    """
    now = now or utc_now()

    calls = [
        CallRecord(
            id=call_id,
            account_id=account_id,
            date=_days_ago(now, days),
            duration=seconds,
            transcript="\n".join(lines),
            sentiment=CallSentiment(score=score, satisfaction=satisfaction, summary=summary, tags=tags),
            outcome=outcome,
        )
        for call_id, account_id, days, seconds, lines, (score, satisfaction, summary, tags), outcome in _CALLS
    ]

    activities = [
        Activity(
            id=activity_id,
            account_id=account_id,
            type=activity_type,
            message=message,
            timestamp=_days_ago(now, days),
        )
        for activity_id, account_id, activity_type, message, days in _ACTIVITIES
    ]

    return _seed_accounts(now), calls, activities
