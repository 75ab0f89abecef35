# Ensure project root is importable so tests can `import app`
import sys
import pathlib
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.errors import StoreReadError, StoreWriteError, UpstreamFetchError  # noqa: E402
from app.models import PlaceInfo, PlaceInfoPayload, UserProfile  # noqa: E402

NOW = datetime(2024, 8, 20, 12, 0, tzinfo=timezone.utc)


class FakePlaceInfoStore:
    """In-memory `place-info` table with upsert-by-id semantics"""

    def __init__(self):
        self.rows = {}
        self.find_calls = []
        self.upsert_calls = []
        self.read_error = None
        self.write_error = None

    def seed(self, record: PlaceInfo):
        self.rows[record.id] = record

    async def find(self, place_id):
        self.find_calls.append(place_id)
        if self.read_error:
            raise StoreReadError(self.read_error)
        return self.rows.get(place_id)

    async def upsert(self, place_id, payload, updated_at):
        self.upsert_calls.append((place_id, payload, updated_at))
        if self.write_error:
            raise StoreWriteError(self.write_error)
        existing = self.rows.get(place_id)
        created_at = existing.created_at if existing else updated_at
        fields = existing.model_dump(include={"main_photo_url", "score", "score_count"}) if existing else {}
        fields.update(payload.model_dump(exclude_unset=True))
        record = PlaceInfo(id=place_id, created_at=created_at, updated_at=updated_at, **fields)
        self.rows[place_id] = record
        return record


class FakePlaceInfoSource:
    def __init__(self, payload=None):
        self.payload = payload or PlaceInfoPayload(main_photo_url="x", score=5, score_count=10)
        self.calls = []
        self.error = None

    async def fetch(self, place_id):
        self.calls.append(place_id)
        if self.error:
            raise UpstreamFetchError(self.error)
        return self.payload


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


class FakeTokenClient:
    def __init__(self, id_token="kakao-id-token", error=None):
        self.id_token = id_token
        self.error = error
        self.calls = []

    async def exchange_code(self, code, redirect_uri):
        self.calls.append((code, redirect_uri))
        if self.error:
            raise self.error
        return self.id_token


def make_kakao_user(**overrides):
    fields = {
        "id": "5f0c3a8e-user",
        "email": "hong@kakao.com",
        "last_sign_in_at": NOW,
        "user_metadata": {"provider_id": "3456789", "picture": "http://k.kakaocdn.net/p.jpg", "name": "Hong"},
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class FakeAuth:
    """Stands in for the Supabase auth API"""

    def __init__(self, user=None, session=True, error=None):
        self.user = user if user is not None else make_kakao_user()
        self.session = SimpleNamespace(access_token="jwt") if session else None
        self.error = error
        self.credentials = []

    async def sign_in_with_id_token(self, credentials):
        self.credentials.append(credentials)
        if self.error:
            raise self.error
        return SimpleNamespace(user=self.user, session=self.session)


class FakeUserStore:
    def __init__(self, error=None):
        self.rows = {}
        self.error = error

    async def upsert(self, profile: UserProfile):
        if self.error:
            raise StoreWriteError(self.error)
        self.rows[profile.id] = profile
        return profile


@pytest.fixture
def store():
    return FakePlaceInfoStore()


@pytest.fixture
def source():
    return FakePlaceInfoSource()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_client():
    return FakeTokenClient()


@pytest.fixture
def auth():
    return FakeAuth()


@pytest.fixture
def user_store():
    return FakeUserStore()
