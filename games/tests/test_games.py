from decimal import Decimal

import pytest

from games import services
from games.exceptions import InvalidBetError
from games.services import play_coin_flip, play_dice
from wallets import ledger
from wallets.exceptions import InsufficientBalanceError, InvalidAmountError
from wallets.models import Transaction

pytestmark = pytest.mark.django_db


class FixedRng:
    """Deterministic stand-in for the module RNG."""

    def __init__(self, value):
        self.value = value

    def randint(self, a, b):
        return self.value

    def choice(self, seq):
        return self.value


@pytest.fixture
def funded(user):
    ledger.credit(user.id, Decimal("100"), "seed")
    return user


def test_dice_hit_pays_five_times(funded):
    result = play_dice(funded.id, Decimal("10"), 4, rng=FixedRng(4))

    assert result.won is True
    assert result.outcome == 4
    assert result.payout == Decimal("50.00")
    assert result.new_balance == Decimal("140.00")

    bet, win = Transaction.objects.filter(user=funded, description__startswith="dice").order_by("id")
    assert (bet.type, bet.amount) == ("debit", Decimal("10.00"))
    assert (win.type, win.amount) == ("credit", Decimal("50.00"))
    assert win.metadata == {"source": "game", "game": "dice", "outcome": 4}


def test_dice_miss_loses_stake(funded):
    result = play_dice(funded.id, Decimal("10"), 4, rng=FixedRng(2))

    assert result.won is False
    assert result.payout == Decimal("0.00")
    assert ledger.balance(funded.id) == Decimal("90.00")


def test_coin_flip_payout_rounds_down(funded):
    result = play_coin_flip(funded.id, Decimal("0.99"), "heads", rng=FixedRng("heads"))

    # 0.99 * 1.9 = 1.881
    assert result.payout == Decimal("1.88")
    assert ledger.balance(funded.id) == Decimal("100.89")


def test_coin_flip_loss(funded):
    result = play_coin_flip(funded.id, Decimal("25"), "tails", rng=FixedRng("heads"))

    assert result.won is False
    assert result.outcome == "heads"
    assert ledger.balance(funded.id) == Decimal("75.00")


def test_stake_above_balance_books_nothing(funded):
    with pytest.raises(InsufficientBalanceError):
        play_coin_flip(funded.id, Decimal("100.01"), "heads", rng=FixedRng("heads"))

    assert ledger.balance(funded.id) == Decimal("100.00")
    assert Transaction.objects.filter(user=funded).count() == 1


@pytest.mark.parametrize("prediction", [0, 7, "3"])
def test_dice_rejects_bad_prediction(funded, prediction):
    with pytest.raises(InvalidBetError):
        play_dice(funded.id, Decimal("1"), prediction, rng=FixedRng(3))


def test_coin_flip_rejects_bad_choice(funded):
    with pytest.raises(InvalidBetError):
        play_coin_flip(funded.id, Decimal("1"), "edge", rng=FixedRng("heads"))


def test_zero_stake_rejected(funded):
    with pytest.raises(InvalidAmountError):
        play_dice(funded.id, Decimal("0"), 1, rng=FixedRng(1))


def test_dice_endpoint(api, funded, monkeypatch):
    monkeypatch.setattr(services, "_rng", FixedRng(6))

    resp = api.post("/api/games/dice/", {"stake": "2.00", "prediction": 6}, format="json")

    assert resp.status_code == 200
    assert resp.data == {"won": True, "outcome": 6, "payout": "10.00", "balance": "108.00"}


def test_coin_flip_endpoint_insufficient_balance(api, user, monkeypatch):
    monkeypatch.setattr(services, "_rng", FixedRng("tails"))

    resp = api.post("/api/games/coinflip/", {"stake": "5", "choice": "tails"}, format="json")

    assert resp.status_code == 400
    assert resp.data["code"] == "insufficient_balance"


def test_coin_flip_endpoint_validates_choice(api, funded):
    resp = api.post("/api/games/coinflip/", {"stake": "5", "choice": "edge"}, format="json")

    assert resp.status_code == 400
    assert "choice" in resp.data
