# bikemart/urls.py
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static

from catalog import views as v

urlpatterns = [
    path("django-admin/", admin.site.urls),

    # Storefront
    path("", v.index, name="home"),
    path("<int:pk>/", v.listing_detail, name="listing_detail"),

    # Sell form + admin panel
    path("", include("marketplace.urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
