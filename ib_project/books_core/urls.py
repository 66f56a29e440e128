from django.urls import path

from . import views

app_name = "books_core"

urlpatterns = [
    path("dashboard/", views.dashboard_view, name="dashboard"),
    path("projects/<uuid:project_id>/summary/", views.project_summary_view,
         name="project-summary"),
    path("transactions/", views.record_transaction_view, name="transaction-record"),
    path("transactions/<uuid:transaction_id>/amend/", views.amend_transaction_view,
         name="transaction-amend"),
    path("transactions/<uuid:transaction_id>/void/", views.void_transaction_view,
         name="transaction-void"),
    path("advances/<uuid:advance_id>/settle/", views.settle_advance_view,
         name="advance-settle"),
]
