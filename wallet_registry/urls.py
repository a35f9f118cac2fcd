"""URL routing for the registry API.


The /api/wallet/ namespace exposes the wallet endpoints; anything that does
not match falls through to a JSON 404.
"""

from django.contrib import admin
from django.urls import path, re_path, include
from api.views_ops import index, route_not_found


urlpatterns = [
	path("", index),
	path("admin/", admin.site.urls),
	path("api/", include("api.urls")),
	re_path(r"^.*$", route_not_found),
]
