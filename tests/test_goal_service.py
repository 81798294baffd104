from dataclasses import replace

import pytest

from utils.errors import NotFoundError, ValidationError


def test_create_normalizes(svc):
    goal = svc.goals.create(" House ", "savings", "50000", "2027-06-01", notes=" down payment ")
    assert goal.name == "House"
    assert goal.target_amount == 50000.0
    assert goal.notes == "down payment"
    assert goal.progress == 0.0


@pytest.mark.parametrize("kwargs", [
    {"name": ""},
    {"target_amount": 0},
    {"target_amount": "x"},
    {"current_amount": -1},
    {"target_date": "June 2027"},
])
def test_create_validation(svc, kwargs):
    params = {"name": "Trip", "goal_type": "travel", "target_amount": 2000, "target_date": "2025-01-01"}
    params.update(kwargs)
    with pytest.raises(ValidationError):
        svc.goals.create(**params)


def test_contribute_and_progress_cap(svc):
    goal = svc.goals.create("Trip", "travel", 1000, "2025-01-01")
    goal = svc.goals.contribute(goal.id, 400)
    assert goal.progress == pytest.approx(0.4)
    assert goal.remaining == pytest.approx(600)
    goal = svc.goals.contribute(goal.id, 900)
    assert goal.progress == 1.0
    assert goal.remaining == 0.0


def test_update_and_delete_missing(svc):
    goal = svc.goals.create("Trip", "travel", 1000, "2025-01-01")
    updated = svc.goals.update(replace(goal, target_amount=1500))
    assert updated.target_amount == 1500
    svc.goals.delete(goal.id)
    with pytest.raises(NotFoundError):
        svc.goals.update(goal)
    with pytest.raises(NotFoundError):
        svc.goals.delete(goal.id)
    with pytest.raises(NotFoundError):
        svc.goals.contribute(goal.id, 10)
