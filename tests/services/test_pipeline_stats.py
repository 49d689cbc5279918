import pytest
from src.models.account import Stage
from src.services.pipeline_stats import compute_pipeline_stats


@pytest.fixture
def one_per_stage(make_account):
    """Six accounts, one in each stage, with easy numbers."""
    rows = [
        (Stage.LEAD, 10_000, 20),
        (Stage.DISCOVERY, 20_000, 40),
        (Stage.PROPOSAL, 30_000, 50),
        (Stage.NEGOTIATION, 40_000, 70),
        (Stage.CLOSED_WON, 50_000, 100),
        (Stage.CLOSED_LOST, 60_000, 0),
    ]
    return [
        make_account(f"acc-{i}", stage=stage, deal_value=value, likelihood=likelihood)
        for i, (stage, value, likelihood) in enumerate(rows)
    ]


class TestPipelineStats:
    """Aggregation over the account set."""

    def test_totals_over_active_deals(self, one_per_stage):
        """Closed deals are excluded from pipeline value and active count."""
        stats = compute_pipeline_stats(one_per_stage)

        assert stats.total_accounts == 6
        assert stats.active_deals == 4
        assert stats.total_pipeline_value == 100_000
        # 2000 + 8000 + 15000 + 28000
        assert stats.weighted_pipeline_value == pytest.approx(53_000)

    def test_averages(self, one_per_stage):
        """Deal size averages all accounts; likelihood averages active ones."""
        stats = compute_pipeline_stats(one_per_stage)

        assert stats.average_deal_size == pytest.approx(35_000)
        assert stats.average_likelihood == pytest.approx(45)

    def test_per_stage_maps(self, one_per_stage):
        """Each stage's count and value match its single account."""
        stats = compute_pipeline_stats(one_per_stage)

        assert all(count == 1 for count in stats.count_by_stage.values())
        assert stats.value_by_stage[Stage.CLOSED_WON] == 50_000
        assert stats.value_by_stage[Stage.LEAD] == 10_000
        assert sum(stats.value_by_stage.values()) == 210_000

    def test_empty_account_set(self):
        """No accounts gives zeros everywhere, not an error."""
        stats = compute_pipeline_stats([])

        assert stats.total_accounts == 0
        assert stats.active_deals == 0
        assert stats.total_pipeline_value == 0
        assert stats.weighted_pipeline_value == 0
        assert stats.average_deal_size == 0
        assert stats.average_likelihood == 0
        assert set(stats.count_by_stage) == set(Stage)
        assert all(v == 0 for v in stats.value_by_stage.values())

    def test_only_closed_deals(self, make_account):
        """Average likelihood is zero when nothing is active."""
        stats = compute_pipeline_stats([
            make_account("a", stage=Stage.CLOSED_WON, deal_value=1000, likelihood=100),
        ])

        assert stats.active_deals == 0
        assert stats.average_likelihood == 0
        assert stats.average_deal_size == 1000

    def test_seed_pipeline(self, store):
        """The demo pipeline has five open deals and one won."""
        stats = compute_pipeline_stats(store.get_accounts())

        assert stats.active_deals == 5
        assert stats.count_by_stage[Stage.CLOSED_WON] == 1
        assert stats.total_pipeline_value == 240_000 + 96_000 + 24_000 + 144_000 + 360_000
