"""Await a user's answer to a blocking modal prompt."""

from __future__ import annotations

import asyncio

from .models import DialogAction, Explanation
from .platform import DialogPresenter


async def confirm(dialogs: DialogPresenter, explanation: Explanation) -> bool:
    """Show a cancel/confirm prompt and return True when the user confirms.

    The cancel action is listed first and the affirmative action last. Only
    the first action to fire decides the answer.
    """

    choice: asyncio.Future[bool] = asyncio.get_running_loop().create_future()

    def _resolve(value: bool) -> None:
        if not choice.done():
            choice.set_result(value)

    actions = [
        DialogAction(explanation.cancel_text, lambda: _resolve(False), style="cancel"),
        DialogAction(explanation.confirm_text, lambda: _resolve(True)),
    ]
    await dialogs.alert(explanation.title, explanation.message, actions)
    return await choice


async def acknowledge(dialogs: DialogPresenter, explanation: Explanation) -> None:
    """Show a single-button notice and wait until it is dismissed."""

    dismissed: asyncio.Future[None] = asyncio.get_running_loop().create_future()

    def _dismiss() -> None:
        if not dismissed.done():
            dismissed.set_result(None)

    await dialogs.alert(
        explanation.title,
        explanation.message,
        [DialogAction(explanation.confirm_text, _dismiss)],
    )
    await dismissed


__all__ = ["confirm", "acknowledge"]
