"""
Merges a free-text prompt into a structured ConditionSet.

Once any structured condition exists the prompt is not sent to the
prompt-search endpoint on its own; it is promoted into the condition
language as a trailing ``ai.search`` clause instead.
"""
from __future__ import annotations

from src.search.conditions import (
    Condition,
    ConditionOperator,
    ConditionSet,
    ConditionSign,
)

AI_SEARCH_ATTRIBUTE = "ai.search"


def has_prompt(prompt: str | None) -> bool:
    return bool(prompt and prompt.strip())


def prompt_condition(prompt: str) -> Condition:
    return Condition(
        attribute=AI_SEARCH_ATTRIBUTE,
        operator=ConditionOperator.OR,
        sign=ConditionSign.EQUALS,
        values=(prompt,),
    )


def combine(conditions: ConditionSet, prompt: str | None) -> ConditionSet:
    """Append the prompt as a synthetic condition; no-op for a blank prompt."""
    if not has_prompt(prompt):
        return conditions
    return conditions.append(prompt_condition(prompt))


def serialize(conditions: ConditionSet) -> str:
    """JSON array for the ``conditions`` request parameter."""
    return conditions.to_json()
