from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    re_path(r"ws/pos/(?P<table_id>\d+)/$", consumers.PosConsumer.as_asgi()),
    re_path(r"ws/tables/(?P<table_id>\d+)/pending/$", consumers.PendingOrderConsumer.as_asgi()),
]
