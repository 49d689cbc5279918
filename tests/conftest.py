import pytest
import datetime as dt
from src.models.account import Account, Stage
from src.repositories.snapshot import SnapshotFile
from src.repositories.store import CRMStore


@pytest.fixture
def snapshot_file(tmp_path):
    """Snapshot path inside the test's temp directory."""
    return SnapshotFile(tmp_path / "pilotcrm-data.json")


@pytest.fixture
def store(snapshot_file):
    """A store loaded with the seed pipeline, persisting to tmp_path."""
    crm_store = CRMStore(snapshot_file)
    crm_store.load()
    return crm_store


@pytest.fixture
def empty_store(snapshot_file):
    """A loaded store with no records at all."""
    crm_store = CRMStore(snapshot_file)
    crm_store.loaded = True
    return crm_store


@pytest.fixture
def make_account():
    """Factory for accounts with sensible defaults."""
    def _make(account_id="acc-test", **overrides):
        fields = dict(
            id=account_id,
            company="Test Corp",
            contact_name="Test User",
            stage=Stage.PROPOSAL,
            deal_value=50_000,
            likelihood=50,
            last_contact_date=dt.datetime(2025, 1, 1, tzinfo=dt.UTC),
        )
        fields.update(overrides)
        return Account(**fields)
    return _make
