# Arithmetic problem source with five fixed difficulty tables (grade 1-5 style).
from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import Protocol


logger = logging.getLogger(__name__)

MIN_LEVEL = 1
MAX_LEVEL = 5

PROBLEM_TYPES: dict[int, tuple[str, ...]] = {
    1: ("addition_simple", "subtraction_simple"),
    2: ("addition_medium", "subtraction_medium", "counting"),
    3: ("addition_hard", "subtraction_hard", "multiplication_simple"),
    4: ("multiplication_medium", "division_simple", "mixed_operations"),
    5: ("multiplication_hard", "division_medium", "word_problems"),
}

DIFFICULTY_INFO: dict[int, tuple[str, str]] = {
    1: ("Beginner", "Simple addition and subtraction (1-10)"),
    2: ("Elementary", "Medium addition, subtraction, and counting (1-50)"),
    3: ("Intermediate", "Harder operations and simple multiplication"),
    4: ("Advanced", "Multiplication, division, and mixed operations"),
    5: ("Expert", "Complex problems and word problems"),
}

HINTS = {
    "addition": "Try counting forward from the first number!",
    "subtraction": "Try counting backward from the first number!",
    "multiplication": "Think of it as repeated addition!",
    "division": "How many times does the second number fit into the first?",
    "counting": "Look for the pattern in the sequence!",
    "word_problem": "Read carefully and find the numbers to work with!",
}
DEFAULT_HINT = "Take your time and think step by step!"

# (question, answer, calculation)
WORD_PROBLEMS = (
    ("Sarah has 8 apples. She gives 3 to her friend. How many does she have left?", 5, "8 - 3"),
    ("There are 4 boxes with 6 toys each. How many toys in total?", 24, "4 × 6"),
    ("Tom collected 15 stickers. He gave away 7. How many does he have now?", 8, "15 - 7"),
    ("A pack has 12 cookies. If 3 children share equally, how many cookies each?", 4, "12 ÷ 3"),
)


@dataclass(frozen=True)
class Problem:
    prompt: str
    answer: int
    kind: str = "addition"
    calculation: str | None = None


class ProblemSource(Protocol):
    """What the engine needs from a problem generator."""

    def set_level(self, level: int) -> None: ...

    def generate(self) -> Problem: ...


class MathProblemGenerator:
    """Level-aware generator; each level draws uniformly from its problem kinds."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng or random.Random()
        self.level = MIN_LEVEL

    def set_level(self, level: int) -> None:
        self.level = max(MIN_LEVEL, min(MAX_LEVEL, int(level)))
        logger.debug("Problem difficulty set to level %d", self.level)

    def generate(self) -> Problem:
        kind = self.rng.choice(PROBLEM_TYPES[self.level])
        return self.create_problem(kind)

    def create_problem(self, kind: str) -> Problem:
        """Build one problem of the named kind."""
        builders = {
            "addition_simple": lambda: self._addition(1, 10),
            "addition_medium": lambda: self._addition(10, 50),
            "addition_hard": lambda: self._addition(20, 100),
            "subtraction_simple": lambda: self._subtraction(1, 10),
            "subtraction_medium": lambda: self._subtraction(10, 50),
            "subtraction_hard": lambda: self._subtraction(20, 100),
            "multiplication_simple": lambda: self._multiplication(1, 5),
            "multiplication_medium": lambda: self._multiplication(2, 10),
            "multiplication_hard": lambda: self._multiplication(5, 15),
            "division_simple": lambda: self._division(2, 20, 2, 5),
            "division_medium": lambda: self._division(10, 50, 2, 10),
            "counting": self._counting,
            "mixed_operations": self._mixed_operation,
            "word_problems": self._word_problem,
        }
        if kind not in builders:
            raise ValueError(f"Unsupported problem kind: {kind}")
        return builders[kind]()

    def difficulty_info(self) -> tuple[str, str]:
        """(name, description) for the current level."""
        return DIFFICULTY_INFO[self.level]

    @staticmethod
    def hint(problem: Problem) -> str:
        return HINTS.get(problem.kind, DEFAULT_HINT)

    def _addition(self, low: int, high: int) -> Problem:
        a = self.rng.randint(low, high)
        b = self.rng.randint(low, high)
        return Problem(f"{a} + {b}", a + b, "addition")

    def _subtraction(self, low: int, high: int) -> Problem:
        a = self.rng.randint(low, high)
        b = self.rng.randint(low, a)  # never negative
        return Problem(f"{a} - {b}", a - b, "subtraction")

    def _multiplication(self, low: int, high: int) -> Problem:
        a = self.rng.randint(low, high)
        b = self.rng.randint(low, high)
        return Problem(f"{a} × {b}", a * b, "multiplication")

    def _division(self, min_result: int, max_result: int, min_divisor: int, max_divisor: int) -> Problem:
        divisor = self.rng.randint(min_divisor, max_divisor)
        # Whole quotients only, so the dividend stays inside the range.
        low = max(1, -(-min_result // divisor))
        high = max(low, max_result // divisor)
        quotient = self.rng.randint(low, high)
        return Problem(f"{divisor * quotient} ÷ {divisor}", quotient, "division")

    def _counting(self) -> Problem:
        start = self.rng.randint(1, 20)
        step = self.rng.randint(2, 5)
        sequence = ", ".join(str(start + step * i) for i in range(3))
        return Problem(f"{sequence}, ?", start + step * 3, "counting")

    def _mixed_operation(self) -> Problem:
        op = self.rng.choice(("+", "-", "×"))
        if op == "+":
            return self._addition(5, 25)
        if op == "-":
            return self._subtraction(10, 30)
        return self._multiplication(2, 8)

    def _word_problem(self) -> Problem:
        question, answer, calculation = self.rng.choice(WORD_PROBLEMS)
        return Problem(question, answer, "word_problem", calculation)
