import pytest

from batch_sender.config import GatewaySettings, RuntimeSettings
from batch_sender.errors import StoreError
from batch_sender.models import MessageKind
from batch_sender.outbound.gateway import DEFAULT_MEDIA_CAPTION, SendOutcome
from batch_sender.outbound.images import ImageProvider
from batch_sender.outbound.teletracker import TeleTrackerClient
from batch_sender.services.outcome_store import OutcomeStore


API_BASE = "https://gateway.test/api"
IMAGE_URL = "https://images.test/300"
JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg\xff\xd9"

_NO_JSON = object()


class FakeResponse:
    """Stand-in for requests.Response with just what the client reads."""

    def __init__(self, status_code=200, json_body=_NO_JSON, text="", content=b""):
        self.status_code = status_code
        self._json = json_body
        self.text = text
        self.content = content

    def json(self):
        if self._json is _NO_JSON:
            raise ValueError("No JSON object could be decoded")
        return self._json


class FakeSession:
    """Records requests and replays queued responses (or raises queued errors)."""

    def __init__(self):
        self.posts = []
        self.gets = []
        self.closed = False
        self._post_results = []
        self._get_results = []

    def queue_post(self, *results):
        self._post_results.extend(results)

    def queue_get(self, *results):
        self._get_results.extend(results)

    def post(self, url, **kwargs):
        self.posts.append((url, kwargs))
        return self._next(self._post_results, FakeResponse(200, {"success": True}))

    def get(self, url, **kwargs):
        self.gets.append((url, kwargs))
        return self._next(self._get_results, FakeResponse(200, content=JPEG_BYTES))

    def close(self):
        self.closed = True

    @staticmethod
    def _next(results, default):
        result = results.pop(0) if results else default
        if isinstance(result, Exception):
            raise result
        return result


class FakeClock:
    """Monotonic clock advancing a fixed step on every read."""

    def __init__(self, step=0.25):
        self._now = 0.0
        self._step = step

    def __call__(self):
        now = self._now
        self._now += self._step
        return now


class ScriptedGateway:
    """SendGateway that logs every call into a shared event list."""

    def __init__(self, events, text_results=None, media_result=True, duration_ms=120):
        self.events = events
        self._text_results = list(text_results or [])
        self._media_result = media_result
        self._duration_ms = duration_ms

    def send_text(self, body):
        self.events.append(("text", body))
        succeeded = self._text_results.pop(0) if self._text_results else True
        return SendOutcome(MessageKind.TEXT, succeeded, self._duration_ms)

    def send_media(self, caption=DEFAULT_MEDIA_CAPTION):
        self.events.append(("media", caption))
        return SendOutcome(MessageKind.MEDIA, self._media_result, self._duration_ms)


class FailingStore:
    """Delegates to a real store but raises StoreError on the Nth record()."""

    def __init__(self, inner, fail_on_call):
        self._inner = inner
        self._fail_on_call = fail_on_call
        self.calls = 0

    def record(self, kind, succeeded, duration_ms):
        self.calls += 1
        if self.calls == self._fail_on_call:
            raise StoreError("disk I/O error")
        self._inner.record(kind, succeeded, duration_ms)


@pytest.fixture
def gateway_settings():
    return GatewaySettings(
        api_base=API_BASE,
        user="integrator",
        password="s3cret",
        account_id="acct-42",
        to_number="15550001111",
        timeout_seconds=5,
    )


@pytest.fixture
def runtime_settings(tmp_path):
    return RuntimeSettings(
        database_url=f"sqlite:///{tmp_path / 'db' / 'messages.db'}",
        pacing_seconds=7.5,
        image_url=IMAGE_URL,
        log_file=None,
    )


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def fake_clock():
    return FakeClock(step=0.25)


@pytest.fixture
def client(gateway_settings, fake_session, fake_clock):
    images = ImageProvider(url=IMAGE_URL, session=fake_session, timeout_seconds=5)
    return TeleTrackerClient(
        settings=gateway_settings,
        session=fake_session,
        image_provider=images,
        clock=fake_clock,
    )


@pytest.fixture
def store(runtime_settings):
    s = OutcomeStore.from_url(runtime_settings.database_url)
    s.ensure_schema()
    yield s
    s.close()


@pytest.fixture
def events():
    return []


@pytest.fixture
def recording_sleep(events):
    def _sleep(seconds):
        events.append(("sleep", seconds))

    return _sleep
