"""
Pipeline Statistics

Pure aggregation over the current account set for the dashboard.
"""
from typing import Iterable

from src.models.account import Account, Stage
from src.models.pipeline_stats import PipelineStats


def compute_pipeline_stats(accounts: Iterable[Account]) -> PipelineStats:
    """
    Summarise the pipeline.

    "Active" means not closed_won and not closed_lost. Active accounts
    drive the total and weighted values, the active-deal count and the
    average likelihood; the average deal size covers every account.
    Empty sets produce zeros.

    Args:
        accounts: Accounts to summarise

    Returns:
        PipelineStats with every stage present in the per-stage maps
    """
    accounts = list(accounts)
    active = [a for a in accounts if not a.stage.is_terminal]

    count_by_stage = {stage: 0 for stage in Stage}
    value_by_stage = {stage: 0.0 for stage in Stage}
    for account in accounts:
        count_by_stage[account.stage] += 1
        value_by_stage[account.stage] += account.deal_value

    total_value = sum(a.deal_value for a in active)

    return PipelineStats(
        total_pipeline_value=total_value,
        weighted_pipeline_value=sum(a.deal_value * a.likelihood / 100 for a in active),
        average_deal_size=(
            sum(a.deal_value for a in accounts) / len(accounts) if accounts else 0
        ),
        average_likelihood=(
            sum(a.likelihood for a in active) / len(active) if active else 0
        ),
        total_accounts=len(accounts),
        active_deals=len(active),
        count_by_stage=count_by_stage,
        value_by_stage=value_by_stage,
    )
