# users/urls.py
from django.urls import path
from .views import RegisterView, DashboardView

# login is the JWT pair endpoint at /api/token/
urlpatterns = [
    path("register/", RegisterView.as_view(), name="user-register"),
    path("dashboard/", DashboardView.as_view(), name="user-dashboard"),
]
