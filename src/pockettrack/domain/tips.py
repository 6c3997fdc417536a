"""Advisory savings tips.

Tips come from a text generation service when one is configured. Whenever
that service is missing, fails, times out or answers with too little text,
tips are computed locally from the user's own expense aggregates instead.
The external call is never retried.
"""

import os
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Protocol

import google.generativeai as genai
import structlog

from pockettrack.domain.entities import Category, Transaction, TransactionType
from pockettrack.domain.summary import expenses_by_category

logger = structlog.get_logger(__name__)

TIP_COUNT = 3

STARTER_TIPS = [
    "Start recording your expenses to receive personalized tips.",
    "Organize your finances by creating specific categories.",
    "Set monthly savings goals.",
]

_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s*")


class TipGenerator(Protocol):
    """Turns a prompt into free text, raising on any failure."""

    def generate(self, prompt: str) -> str: ...


class GeminiTipGenerator:
    """Tip generator backed by Google Gemini."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-1.5-flash",
        timeout: float = 10.0,
        temperature: float = 0.7,
        max_output_tokens: int = 200,
    ):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(model_name)
        self.timeout = timeout
        self.generation_config = genai.types.GenerationConfig(
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

    @classmethod
    def from_env(cls) -> Optional["GeminiTipGenerator"]:
        """Build a generator from GEMINI_API_KEY / GEMINI_MODEL, or None without a key."""
        api_key = os.environ.get("GEMINI_API_KEY")
        if not api_key:
            return None
        return cls(api_key=api_key, model_name=os.environ.get("GEMINI_MODEL", "gemini-1.5-flash"))

    def generate(self, prompt: str) -> str:
        response = self._model.generate_content(
            prompt,
            generation_config=self.generation_config,
            request_options={"timeout": self.timeout},
        )
        return response.text


class TipService:
    """Service producing three savings tips for a set of transactions."""

    def __init__(self, generator: Optional[TipGenerator] = None):
        """Initialize tip service.

        Args:
            generator: External text generator; None means heuristic tips only
        """
        self.generator = generator

    def generate_tips(
        self, transactions: Iterable[Transaction], categories: dict[str, Category]
    ) -> list[str]:
        """Return exactly three tips for the given transactions.

        Args:
            transactions: Usually one month of a user's transactions
            categories: The user's categories keyed by ID
        """
        expenses = [t for t in transactions if t.type == TransactionType.EXPENSE]
        if not expenses:
            return list(STARTER_TIPS)

        totals = expenses_by_category(expenses, categories)
        total_spent = sum((t.amount for t in expenses), Decimal("0"))

        if self.generator is not None:
            try:
                tips = parse_tips(self.generator.generate(build_prompt(total_spent, totals)))
                if len(tips) == TIP_COUNT:
                    return tips
                logger.warning("tip_generation_failed", error="too few tips", received=len(tips))
            except Exception as e:
                logger.warning("tip_generation_failed", error=str(e))

        return heuristic_tips(totals, total_spent, len(expenses))


def build_prompt(total_spent: Decimal, totals) -> str:
    """Build the generation prompt from the expense aggregates."""
    lines = "\n".join(
        f"- {t.category_name}: {t.total:.2f} ({t.count} transactions)" for t in totals[:5]
    )
    return (
        "Analyze this month of personal finance data and give exactly 3 short, "
        "practical money-saving tips.\n\n"
        f"Total spent: {total_spent:.2f}\n"
        f"Top expense categories:\n{lines}\n\n"
        "Answer with ONLY 3 lines, one tip per line, no numbering, no introduction."
    )


def parse_tips(text: str) -> list[str]:
    """Split generated text into at most three tips, dropping bullets and blanks."""
    tips = []
    for line in (text or "").splitlines():
        tip = _BULLET.sub("", line).strip()
        if tip:
            tips.append(tip)
    return tips[:TIP_COUNT]


def heuristic_tips(totals, total_spent: Decimal, expense_count: int) -> list[str]:
    """Compute tips locally from expense aggregates."""
    top = totals[0]
    share = (top.total / total_spent * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return [
        f"Your largest expense is {top.category_name} ({share}% of the total). "
        "Consider reviewing that spending.",
        f"You had {expense_count} expense transactions this month. "
        "Try consolidating purchases to save.",
        "Set a monthly limit for each category and track your progress.",
    ]
