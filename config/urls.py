"""URL configuration.

Availability lives in the Clubs app, price rules and holidays in pricing.
Managers authenticate with a JWT from /api/auth/token/.
"""
from django.contrib import admin
from django.urls import include, path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/token/", TokenObtainPairView.as_view(), name="token-obtain"),
    path("api/auth/token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("api/", include("Clubs.urls")),
    path("api/", include("pricing.urls")),
]
