from dataclasses import dataclass


@dataclass
class Goal:
    id: int
    name: str
    goal_type: str
    target_amount: float
    current_amount: float = 0.0
    target_date: str = ""       # 'YYYY-MM-DD'
    notes: str = ""

    @property
    def progress(self) -> float:
        if self.target_amount <= 0:
            return 0.0
        return min(1.0, self.current_amount / self.target_amount)

    @property
    def remaining(self) -> float:
        return max(0.0, self.target_amount - self.current_amount)
