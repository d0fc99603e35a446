# initiative_prioritizer/test_scripts/test_scoring_service.py
# Tests for ScoringService persistence and batch rescoring
import pytest
from sqlalchemy import select

from prioritizer.db.models.initiative import Initiative
from prioritizer.db.models.scoring import InitiativeScore
from prioritizer.jobs.rescore_job import run_rescore_batch
from prioritizer.services.scoring import ScoreInputs
from prioritizer.services.scoring.engines import WeightedScoringEngine
from prioritizer.services.scoring_service import ScoringService
from prioritizer.utils.provenance import Provenance


def add_initiative(db, **fields) -> Initiative:
    values = dict(title="Reduce auth latency", status="backlog")
    values.update(fields)
    initiative = Initiative(**values)
    db.add(initiative)
    db.commit()
    return initiative


def test_score_initiative_sets_score_breakdown_and_history(db):
    initiative = add_initiative(
        db,
        category="performance",
        vertical="processing",
        client_type="top_issuer",
        countries=["brazil"],
    )
    service = ScoringService(db, engine=WeightedScoringEngine())

    breakdown = service.score_initiative(initiative)
    db.commit()

    assert breakdown.total_score == 140
    assert initiative.score == 140
    assert initiative.score_breakdown["total_score"] == 140
    assert initiative.score_breakdown["country_score"] == 25
    assert initiative.scored_at is not None
    assert initiative.updated_source == "scoring.manual"

    history = db.execute(select(InitiativeScore)).scalars().all()
    assert len(history) == 1
    assert history[0].total_score == 140
    assert history[0].trigger == "scoring.manual"
    assert history[0].inputs_json["countries"] == ["brazil"]


def test_rescoring_replaces_the_whole_breakdown(db):
    initiative = add_initiative(db, category="new_product", systemic_risk="blocker")
    service = ScoringService(db, engine=WeightedScoringEngine())
    service.score_initiative(initiative)
    assert initiative.score == 400

    initiative.category = None
    initiative.systemic_risk = "low"
    service.score_initiative(initiative, enable_history=False)

    assert initiative.score == 5
    assert initiative.score_breakdown["category_score"] == 0
    assert initiative.score_breakdown["risk_score"] == 5
    assert len(db.execute(select(InitiativeScore)).scalars().all()) == 1


def test_score_by_id_commits(db):
    initiative = add_initiative(db, category="regulatory")
    service = ScoringService(db, engine=WeightedScoringEngine())

    scored = service.score_by_id(initiative.id)

    assert scored.id == initiative.id
    assert db.get(Initiative, initiative.id).score == 30


def test_score_by_id_unknown_initiative(db):
    service = ScoringService(db, engine=WeightedScoringEngine())
    with pytest.raises(LookupError):
        service.score_by_id("does-not-exist")


def test_garbage_classification_scores_zero_without_raising(db):
    initiative = add_initiative(db, category="???", countries="not json [", experience_impact={"a": 1})
    breakdown = ScoringService(db, engine=WeightedScoringEngine()).score_initiative(initiative)
    assert breakdown.total_score == 0
    assert initiative.score == 0


def test_score_all_filters_by_status_and_missing_scores(db):
    service = ScoringService(db, engine=WeightedScoringEngine())
    backlog = add_initiative(db, category="regulatory")
    review = add_initiative(db, category="value_prop", status="review")
    done = add_initiative(db, category="performance", status="review")
    service.score_initiative(done)
    db.commit()

    assert service.score_all(statuses=["review"], only_missing_scores=True) == 1
    assert review.score == 20
    assert backlog.scored_at is None

    assert service.score_all(commit_every=1) == 3
    assert backlog.score == 30
    triggers = {row.trigger for row in db.execute(select(InitiativeScore)).scalars()}
    assert triggers == {"scoring.manual", "scoring.batch"}


def test_run_rescore_batch_uses_the_service(db):
    add_initiative(db, category="regulatory")
    add_initiative(db, category="value_prop", status="roadmap")

    count = run_rescore_batch(db, statuses=("roadmap",))

    assert count == 1
    row = db.execute(select(Initiative).where(Initiative.status == "roadmap")).scalar_one()
    assert row.score == 20
    assert row.updated_source == Provenance.SCORING_BATCH.value


def test_preview_does_not_touch_the_database(db):
    service = ScoringService(db, engine=WeightedScoringEngine())
    breakdown = service.preview(ScoreInputs(category="performance", countries=["mexico"]))

    assert breakdown.total_score == 50
    assert db.execute(select(InitiativeScore)).first() is None


def test_preview_accepts_plain_dicts(db):
    breakdown = ScoringService(db, engine=WeightedScoringEngine()).preview({"vertical": "core"})
    assert breakdown.total_score == 35
