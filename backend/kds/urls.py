from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import KitchenQueueViewSet

app_name = 'kds'

router = DefaultRouter()
router.register(r'queue', KitchenQueueViewSet, basename='kitchen-queue')

urlpatterns = [
    path('', include(router.urls)),
]
