import pytest

from intentui.config import Config
from intentui.core.ledger import Ledger
from intentui.core.tracker import DensityTracker
from intentui.core.types import Density, IntentCategory


def _tracker(**kw) -> DensityTracker:
    return DensityTracker(Config(), **kw)


def test_initial_state():
    t = _tracker()
    assert t.density is Density.STANDARD
    assert t.reasoning == "initial state"
    assert t.override is None
    assert t.last_result is None
    assert t.profile.interactions == 0


def test_process_input_adopts_classifier_result():
    t = _tracker()
    snap = t.process_input("Add 500 dollars for food")
    assert snap.density is Density.MINIMAL
    assert snap.reasoning == t.last_result.reasoning
    assert snap.last_result.intent is IntentCategory.ACTION
    assert t.profile.interactions == 1


def test_override_survives_same_intent_then_decays_on_change():
    t = _tracker()
    t.set_manual_override(Density.STANDARD)

    snap = t.process_input("Add 10 food")
    assert snap.density is Density.STANDARD
    assert snap.override is Density.STANDARD
    assert snap.reasoning.startswith("manual override active")

    snap = t.process_input("Why am I broke")
    assert snap.override is None
    assert snap.density is Density.EXPANDED
    assert snap.reasoning.startswith("seeking guidance")


def test_override_survives_when_previous_turn_had_same_intent():
    t = _tracker()
    t.process_input("add 5 tea")
    t.set_manual_override("expanded")
    snap = t.process_input("Add 10 food")
    assert snap.density is Density.EXPANDED
    assert snap.override_active


def test_set_manual_override_applies_immediately():
    t = _tracker()
    t.process_input("Add 500 dollars for food")
    snap = t.set_manual_override(Density.EXPANDED)
    assert snap.density is Density.EXPANDED
    assert snap.reasoning.startswith("user override")
    assert t.override is Density.EXPANDED


def test_new_override_replaces_previous():
    t = _tracker()
    t.set_manual_override(Density.MINIMAL)
    t.set_manual_override(Density.EXPANDED)
    assert t.override is Density.EXPANDED
    assert t.density is Density.EXPANDED


def test_unknown_override_name_rejected():
    t = _tracker()
    with pytest.raises(ValueError):
        t.set_manual_override("HUGE")
    assert t.override is None


def test_record_success_clears_override():
    t = _tracker()
    t.process_input("Why am I broke")
    t.set_manual_override(Density.MINIMAL)

    snap = t.record_success()
    assert snap.override is None
    assert snap.density is Density.EXPANDED
    assert snap.reasoning == t.last_result.reasoning
    assert t.profile.successful_actions == 1

    snap = t.process_input("Show my spending chart")
    assert snap.density is Density.STANDARD
    assert not snap.reasoning.startswith("manual override")


def test_record_success_without_prior_result():
    t = _tracker()
    t.set_manual_override(Density.MINIMAL)
    snap = t.record_success()
    assert snap.density is Density.STANDARD
    assert snap.reasoning == "initial state"


def test_record_success_without_override_keeps_density():
    t = _tracker()
    t.process_input("Delete it now!")
    before = t.snapshot()
    after = t.record_success()
    assert after.density is before.density
    assert after.reasoning == before.reasoning


def test_intent_changed_flag_feeds_next_turn():
    t = _tracker()
    t.process_input("add tea")
    assert not t.profile.intent_changed
    t.process_input("show chart")
    assert t.profile.intent_changed
    snap = t.process_input("show chart")
    assert snap.last_result.confidence == pytest.approx(0.9)
    assert not t.profile.intent_changed


def test_repeated_input_is_stable():
    t = _tracker()
    a = t.process_input("Add 500 dollars for food")
    b = t.process_input("Add 500 dollars for food")
    assert a.density is b.density
    assert a.reasoning == b.reasoning
    assert t.profile.interactions == 2


def test_hesitations_lower_confidence():
    t = _tracker()
    t.record_hesitation(6)
    snap = t.process_input("add coffee")
    assert snap.last_result.confidence == pytest.approx(0.9)
    with pytest.raises(ValueError):
        t.record_hesitation(-1)


def test_profile_is_a_copy():
    t = _tracker()
    p = t.profile
    p.interactions = 42
    assert t.profile.interactions == 0


def test_ledger_trace(tmp_path):
    ledger = Ledger(str(tmp_path / "trace" / "ledger.jsonl"))
    t = _tracker(ledger=ledger, session_id="s1")
    t.set_manual_override(Density.STANDARD)
    t.process_input("Add 10 food")
    t.process_input("Why am I broke")
    t.record_success()

    recs = ledger.tail()
    kinds = [r["kind"] for r in recs]
    assert kinds == ["override_set", "classify", "override_decay", "classify", "success"]
    assert all(r["session"] == "s1" for r in recs)
    assert recs[2]["cause"] == "intent_changed"
    assert recs[3]["density"] == "EXPANDED"
    assert all("ts" in r for r in recs)
