"""
Tests for the CRM store: lookups, mutations, activity logging and
snapshot persistence.
"""
import json
import pytest
from unittest.mock import patch

from src.models.account import NewAccount, Stage
from src.models.activity import ActivityType
from src.models.call import NewCallRecord
from src.repositories.store import AccountNotFoundError, CRMStore


class TestLoading:
    """Seed and snapshot loading."""

    def test_seeds_when_no_snapshot(self, store):
        """First run loads the demo pipeline."""
        assert store.loaded is True
        assert len(store.get_accounts()) == 6
        assert len(store.get_all_calls()) == 14
        assert len(store.activities) == 33

    def test_round_trips_through_snapshot(self, store, snapshot_file):
        """A second store over the same file sees the first one's writes."""
        account = store.get_account("acc-3")
        store.update_account_stage(account.id, Stage.PROPOSAL)

        reloaded = CRMStore(snapshot_file)
        reloaded.load()

        assert reloaded.get_account("acc-3").stage == Stage.PROPOSAL
        assert len(reloaded.activities) == len(store.activities)

    def test_invalid_stage_in_snapshot_resets_to_lead(self, store, snapshot_file):
        """An unknown stage in a snapshot is repaired, not fatal."""
        store.persist()
        raw = json.loads(snapshot_file.path.read_text())
        raw["accounts"][0]["stage"] = "undefined"
        snapshot_file.path.write_text(json.dumps(raw))

        reloaded = CRMStore(snapshot_file)
        reloaded.load()

        assert reloaded.get_account(raw["accounts"][0]["id"]).stage == Stage.LEAD
        assert all(a.stage in set(Stage) for a in reloaded.get_accounts())

    def test_corrupt_activities_dropped(self, store, snapshot_file):
        """Activities carrying the undefined-stage marker are filtered out."""
        store.add_activity("acc-1", ActivityType.STAGE_CHANGE, "Stage changed from Lead → undefined")
        count = len(store.activities)

        reloaded = CRMStore(snapshot_file)
        reloaded.load()

        assert len(reloaded.activities) == count - 1

    def test_non_string_stage_resets_to_lead(self, store, snapshot_file):
        """Stages that are not strings are repaired like unknown names."""
        store.persist()
        raw = json.loads(snapshot_file.path.read_text())
        raw["accounts"][1]["stage"] = ["proposal"]
        raw["accounts"][2]["stage"] = None
        snapshot_file.path.write_text(json.dumps(raw))

        reloaded = CRMStore(snapshot_file)
        reloaded.load()

        assert reloaded.get_account(raw["accounts"][1]["id"]).stage == Stage.LEAD
        assert reloaded.get_account(raw["accounts"][2]["id"]).stage == Stage.LEAD

    def test_null_activities_load_as_empty(self, store, snapshot_file):
        """A snapshot with activities: null keeps its accounts."""
        store.add_note_to_account("acc-1", "kept")
        raw = json.loads(snapshot_file.path.read_text())
        raw["activities"] = None
        snapshot_file.path.write_text(json.dumps(raw))

        reloaded = CRMStore(snapshot_file)
        reloaded.load()

        assert reloaded.activities == []
        assert reloaded.get_account("acc-1").notes[-1] == "kept"

    def test_malformed_entries_fall_back_to_seed(self, snapshot_file):
        """Non-object accounts or activities never crash startup."""
        snapshot_file.path.write_text(json.dumps({
            "accounts": ["not an account", 42],
            "callRecords": [],
            "activities": ["junk"],
        }))

        crm_store = CRMStore(snapshot_file)
        crm_store.load()

        assert crm_store.loaded is True
        assert len(crm_store.get_accounts()) == 6

    def test_unreadable_snapshot_falls_back_to_seed(self, snapshot_file):
        """A snapshot that is not JSON is ignored."""
        snapshot_file.path.write_text("{not json")

        crm_store = CRMStore(snapshot_file)
        crm_store.load()

        assert len(crm_store.get_accounts()) == 6

    def test_empty_snapshot_falls_back_to_seed(self, snapshot_file):
        """A snapshot with no accounts is treated as missing."""
        snapshot_file.path.write_text(json.dumps({"accounts": [], "callRecords": [], "activities": []}))

        crm_store = CRMStore(snapshot_file)
        crm_store.load()

        assert len(crm_store.get_accounts()) == 6


class TestLookups:
    """Account and activity queries."""

    def test_company_lookup_is_case_insensitive(self, store):
        """Exact names match regardless of case."""
        assert store.get_account_by_company("meridian health").id == "acc-1"

    def test_company_lookup_prefers_exact_match(self, store):
        """An exact match wins over an earlier partial match."""
        store.create_account(NewAccount(company="Atlas", contact_name="A"))
        assert store.get_account_by_company("atlas").company == "Atlas"

    def test_company_lookup_partial(self, store):
        """Substrings match when nothing matches exactly."""
        assert store.get_account_by_company("novapay").id == "acc-2"

    def test_blank_company_matches_nothing(self, store):
        """Blank lookups return None."""
        assert store.get_account_by_company("") is None
        assert store.get_account_by_company("   ") is None

    def test_require_account_raises(self, store):
        """Unknown ids raise AccountNotFoundError naming the id."""
        with pytest.raises(AccountNotFoundError, match='"nope" not found'):
            store.require_account("nope")

    def test_activities_newest_first(self, store):
        """Per-account activities are sorted newest first."""
        activities = store.get_activities_by_account("acc-1")
        timestamps = [a.timestamp for a in activities]
        assert timestamps == sorted(timestamps, reverse=True)

    def test_recent_activities_limited(self, store):
        """get_recent_activities returns at most `limit` items."""
        recent = store.get_recent_activities(20)
        assert len(recent) == 20
        assert recent[0].timestamp >= recent[-1].timestamp


class TestMutations:
    """Mutations and the activities they append."""

    def test_create_account_defaults(self, store):
        """New accounts start as inbound leads."""
        account = store.create_account(
            NewAccount(company="Acme", contact_name="Ann", contact_role="CTO")
        )

        assert account.id.startswith("s-")
        assert account.stage == Stage.LEAD
        assert account.likelihood == 25
        assert account.tags == ["inbound"]
        assert account.next_follow_up is not None
        assert store.activities[-1].message == "New inbound lead: Acme — Ann (CTO)"

    def test_ids_are_unique(self, store):
        """Generated ids never repeat."""
        ids = {store.new_id() for _ in range(100)}
        assert len(ids) == 100

    def test_stage_change_logs_activity(self, store):
        """Changing stage appends a stage_change activity with labels."""
        store.update_account_stage("acc-4", Stage.DISCOVERY)

        activity = store.activities[-1]
        assert activity.type == ActivityType.STAGE_CHANGE
        assert activity.message == "Stage changed from Lead → Discovery"

    def test_same_stage_is_noop(self, store):
        """Moving to the current stage appends nothing."""
        before = len(store.activities)

        account = store.update_account_stage("acc-1", Stage.NEGOTIATION)

        assert account.stage == Stage.NEGOTIATION
        assert len(store.activities) == before

    def test_stage_update_accepts_free_text(self, store):
        """Stage names are normalized."""
        store.update_account_stage("acc-4", "Closed Lost")
        assert store.get_account("acc-4").stage == Stage.CLOSED_LOST

    def test_unknown_account_returns_none(self, store):
        """Mutators return None for unknown ids."""
        assert store.update_account_stage("nope", Stage.LEAD) is None
        assert store.update_account_likelihood("nope", 10) is None
        assert store.add_note_to_account("nope", "x") is None
        assert store.flag_account_risk("nope", "x") is None

    @pytest.mark.parametrize("value,expected", [(150, 100), (-20, 0), (55, 55)])
    def test_likelihood_clamped(self, store, value, expected):
        """Likelihood stays within [0, 100]."""
        assert store.update_account_likelihood("acc-1", value).likelihood == expected

    @pytest.mark.parametrize("value,expected", [(42.7, 43), (42.5, 43), (42.4, 42), (99.6, 100)])
    def test_fractional_likelihood_rounds_half_up(self, store, value, expected):
        """The update path stores the same integer the model would."""
        assert store.update_account_likelihood("acc-1", value).likelihood == expected

    def test_add_note_logs_activity(self, store):
        """Notes go on the account and into the activity log."""
        store.add_note_to_account("acc-2", "Pricing sent")

        assert store.get_account("acc-2").notes[-1] == "Pricing sent"
        assert store.activities[-1].type == ActivityType.NOTE
        assert store.activities[-1].message == "Pricing sent"

    def test_add_call_record(self, store):
        """Calls update last contact and log a call activity."""
        call = store.add_call_record(
            "acc-2",
            NewCallRecord(account_id="acc-2", duration=150, outcome="Demo booked"),
        )

        assert call in store.get_calls_by_account("acc-2")
        assert store.get_account("acc-2").last_contact_date == call.date
        assert store.activities[-1].message == "Call recorded — Demo booked (3 min)"

    def test_add_call_record_unknown_account(self, store):
        """Calls for unknown accounts are rejected."""
        with pytest.raises(AccountNotFoundError):
            store.add_call_record("nope", NewCallRecord(account_id="nope"))

    def test_delete_account(self, store):
        """Deleting removes the account; unknown ids return False."""
        assert store.delete_account("acc-6") is True
        assert store.get_account("acc-6") is None
        assert store.delete_account("acc-6") is False

    def test_flag_risk_twice(self, store):
        """The tag appears once; both notes are kept."""
        notes_before = len(store.get_account("acc-4").notes)

        store.flag_account_risk("acc-4", "No reply in two weeks")
        store.flag_account_risk("acc-4", "Champion left")

        account = store.get_account("acc-4")
        assert account.tags.count("at-risk") == 1
        assert account.notes[notes_before:] == [
            "⚠️ AT-RISK: No reply in two weeks",
            "⚠️ AT-RISK: Champion left",
        ]


class TestPersistence:
    """Snapshot writes on mutation."""

    def test_mutation_writes_snapshot(self, store, snapshot_file):
        """Every mutation rewrites the snapshot file."""
        store.add_note_to_account("acc-1", "persist me")

        raw = json.loads(snapshot_file.path.read_text())
        meridian = next(a for a in raw["accounts"] if a["id"] == "acc-1")
        assert meridian["notes"][-1] == "persist me"
        assert "callRecords" in raw

    def test_write_failure_keeps_memory_state(self, store):
        """A failed write is logged; the change stays in memory."""
        with patch.object(store.snapshot, "write", side_effect=OSError("disk full")):
            assert store.persist() is False
            account = store.add_note_to_account("acc-1", "only in memory")

        assert account.notes[-1] == "only in memory"
