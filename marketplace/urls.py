# marketplace/urls.py
from django.urls import path
from . import views

urlpatterns = [
    # Sell form
    path("sell/", views.sell_submit, name="sell_submit"),
    path("sell/suggest-price/", views.suggest_price, name="suggest_price"),

    # Admin session + dashboard
    path("admin/", views.admin_dashboard, name="admin_dashboard"),
    path("admin/login/", views.admin_login, name="admin_login"),
    path("admin/logout/", views.admin_logout, name="admin_logout"),

    # Listings
    path("admin/listings/", views.listing_create, name="listing_create"),
    path("admin/listings/<int:pk>/", views.listing_update, name="listing_update"),
    path("admin/listings/<int:pk>/delete/", views.listing_delete, name="listing_delete"),

    # Submissions
    path("admin/submissions/<int:pk>/approve/", views.submission_approve, name="submission_approve"),
    path("admin/submissions/<int:pk>/delete/", views.submission_delete, name="submission_delete"),

    # Testimonials
    path("admin/testimonials/", views.testimonial_create, name="testimonial_create"),
    path("admin/testimonials/<int:pk>/", views.testimonial_update, name="testimonial_update"),
    path("admin/testimonials/<int:pk>/delete/", views.testimonial_delete, name="testimonial_delete"),
]
