"""
Coin games. A round posts the stake as a debit and, when won, the payout
as a credit. Both entries go through the ledger in one transaction, so a
round is either fully booked or not at all.
"""
from __future__ import annotations

import logging
import secrets
from decimal import Decimal
from typing import NamedTuple

from django.db import transaction

from wallets import ledger
from wallets.units import ZERO, q
from .exceptions import InvalidBetError

logger = logging.getLogger(__name__)

DICE_FACES = 6
DICE_MULTIPLIER = Decimal("5")
COIN_SIDES = ("heads", "tails")
COIN_FLIP_MULTIPLIER = Decimal("1.9")

_rng = secrets.SystemRandom()


class GameResult(NamedTuple):
    won: bool
    outcome: object
    payout: Decimal
    new_balance: Decimal


def _settle(user_id, game: str, stake, won: bool, multiplier: Decimal, outcome) -> GameResult:
    metadata = {"source": "game", "game": game, "outcome": outcome}
    with transaction.atomic():
        result = ledger.debit(user_id, stake, f"{game} bet", metadata)
        payout = ZERO
        if won:
            payout = q(result.transaction.amount * multiplier)
            result = ledger.credit(user_id, payout, f"{game} win", metadata)

    logger.info("game %s user=%s stake=%s outcome=%s payout=%s", game, user_id, stake, outcome, payout)
    return GameResult(won, outcome, payout, result.new_balance)


def play_dice(user_id, stake, prediction: int, rng=None) -> GameResult:
    """Guess the face of a six-sided die; a hit pays 5x the stake."""
    if not isinstance(prediction, int) or not 1 <= prediction <= DICE_FACES:
        raise InvalidBetError(f"Prediction must be between 1 and {DICE_FACES}.")
    roll = (rng or _rng).randint(1, DICE_FACES)
    return _settle(user_id, "dice", stake, roll == prediction, DICE_MULTIPLIER, roll)


def play_coin_flip(user_id, stake, choice: str, rng=None) -> GameResult:
    """Call heads or tails; a hit pays 1.9x the stake."""
    if choice not in COIN_SIDES:
        raise InvalidBetError("Choice must be 'heads' or 'tails'.")
    side = (rng or _rng).choice(COIN_SIDES)
    return _settle(user_id, "coinflip", stake, side == choice, COIN_FLIP_MULTIPLIER, side)
