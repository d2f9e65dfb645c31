from django.urls import path
from .views import CoinFlipView, DiceView

urlpatterns = [
    path("dice/", DiceView.as_view(), name="games-dice"),
    path("coinflip/", CoinFlipView.as_view(), name="games-coinflip"),
]
