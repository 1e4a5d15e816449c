"""
ASGI entry point.

Serves HTTP through Django and websockets through Django Channels. Uvicorn
loads `config.asgi:application`.

Websocket stack (outermost first):
    1. AllowedHostsOriginValidator - Origin must match ALLOWED_HOSTS
    2. JWTAuthMiddleware - resolves scope["user"] from ?token= or the jwt subprotocol
    3. URLRouter - ws/chat/ -> ChatConsumer
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

# Django must be set up before consumers and models are imported
django_asgi_app = get_asgi_application()

from channels.routing import ProtocolTypeRouter, URLRouter  # noqa: E402
from channels.security.websocket import AllowedHostsOriginValidator  # noqa: E402

from chat.middleware import JWTAuthMiddleware  # noqa: E402
from chat.routing import websocket_urlpatterns  # noqa: E402

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": AllowedHostsOriginValidator(
            JWTAuthMiddleware(URLRouter(websocket_urlpatterns))
        ),
    }
)
