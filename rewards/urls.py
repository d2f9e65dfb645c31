from django.urls import path
from .views import RedeemView

urlpatterns = [
    path("redeem/", RedeemView.as_view(), name="rewards-redeem"),
]
