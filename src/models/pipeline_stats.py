from typing import Dict
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from src.models.account import Stage


def _zero_by_stage() -> Dict[Stage, float]:
    return {stage: 0 for stage in Stage}


class PipelineStats(BaseModel):
    """Derived view over the current accounts. Recomputed on every read."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_pipeline_value: float = 0
    weighted_pipeline_value: float = 0
    average_deal_size: float = 0
    average_likelihood: float = 0
    total_accounts: int = 0
    active_deals: int = 0
    count_by_stage: Dict[Stage, int] = Field(default_factory=_zero_by_stage)
    value_by_stage: Dict[Stage, float] = Field(default_factory=_zero_by_stage)
