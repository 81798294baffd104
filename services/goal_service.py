from dataclasses import replace

from database.goal_dao import GoalDAO
from models.goal import Goal
from utils.date_helpers import format_date, parse_date
from utils.errors import NotFoundError, ValidationError


class GoalService:
    def __init__(self, goal_dao: GoalDAO):
        self._dao = goal_dao

    def get_all(self) -> list[Goal]:
        return self._dao.get_all()

    def get_by_id(self, goal_id: int) -> Goal | None:
        return self._dao.get_by_id(goal_id)

    def create(
        self,
        name: str,
        goal_type: str,
        target_amount: float,
        target_date: str,
        current_amount: float = 0.0,
        notes: str = "",
    ) -> Goal:
        goal = self._validate(
            Goal(
                id=0,
                name=name,
                goal_type=goal_type,
                target_amount=target_amount,
                current_amount=current_amount,
                target_date=target_date,
                notes=notes,
            )
        )
        return self._dao.create(
            goal.name, goal.goal_type, goal.target_amount,
            goal.current_amount, goal.target_date, goal.notes,
        )

    def update(self, goal: Goal) -> Goal:
        if self._dao.get_by_id(goal.id) is None:
            raise NotFoundError("Goal", goal.id)
        return self._dao.update(self._validate(goal))

    def contribute(self, goal_id: int, amount: float) -> Goal:
        goal = self._dao.get_by_id(goal_id)
        if goal is None:
            raise NotFoundError("Goal", goal_id)
        return self._dao.update(replace(goal, current_amount=goal.current_amount + float(amount)))

    def delete(self, goal_id: int):
        self._dao.delete(goal_id)

    @staticmethod
    def _validate(goal: Goal) -> Goal:
        name = (goal.name or "").strip()
        if not name:
            raise ValidationError("Goal name cannot be empty.")
        try:
            target = float(goal.target_amount)
            current = float(goal.current_amount or 0.0)
        except (TypeError, ValueError):
            raise ValidationError("Goal amounts must be numeric.") from None
        if target <= 0:
            raise ValidationError("Target amount must be positive.")
        if current < 0:
            raise ValidationError("Current amount cannot be negative.")
        d = parse_date(goal.target_date)
        if d is None:
            raise ValidationError("Invalid target date. Use YYYY-MM-DD.")
        return replace(
            goal,
            name=name,
            goal_type=(goal.goal_type or "").strip(),
            target_amount=target,
            current_amount=current,
            target_date=format_date(d),
            notes=(goal.notes or "").strip(),
        )
