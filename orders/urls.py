from django.urls import path
from .views import PlaceOrderView, OrderListView, OrderTrackView

urlpatterns = [
    path("", OrderListView.as_view(), name="order-list"),
    path("place/", PlaceOrderView.as_view(), name="order-place"),
    path("<int:pk>/", OrderTrackView.as_view(), name="order-track"),
]
