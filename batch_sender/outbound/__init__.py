# batch_sender/outbound/__init__.py
from .gateway import SendGateway, SendOutcome, DEFAULT_MEDIA_CAPTION
from .images import ImageProvider
from .teletracker import TeleTrackerClient
from .factory import build_gateway
