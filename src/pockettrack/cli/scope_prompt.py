"""Interactive scope selection for recurring records."""

from enum import Enum
from typing import Optional, Type, TypeVar

import click

CANCEL = "cancel"

S = TypeVar("S", bound=Enum)


def prompt_for_scope(scope_type: Type[S], question: str) -> Optional[S]:
    """Ask which part of a series to act on.

    Returns:
        The chosen scope, or None when the user cancels
    """
    choices = [scope.value for scope in scope_type] + [CANCEL]
    answer = click.prompt(
        question,
        type=click.Choice(choices, case_sensitive=False),
        default=CANCEL,
    )
    if answer.lower() == CANCEL:
        return None
    return scope_type(answer.lower())
