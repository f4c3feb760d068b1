from django.urls import path

from .auth_views import LoginView
from .auth_views import LogoutView
from .auth_views import MeView
from .auth_views import RefreshView

urlpatterns = [
    path("login", LoginView.as_view(), name="login"),
    path("refresh", RefreshView.as_view(), name="refresh"),
    path("logout", LogoutView.as_view(), name="logout"),
    path("me", MeView.as_view(), name="me"),
]
