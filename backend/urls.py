from django.contrib import admin
from django.urls import include, path

from backend.core.views import home

urlpatterns = [
    path("", home, name="home"),
    path("admin/", admin.site.urls),
    path("api/", include("users.urls")),
    path("api/investments/", include("investments.urls")),
    path("api/wallet/", include("wallet.urls")),
]
