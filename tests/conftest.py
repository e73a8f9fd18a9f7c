import os, sys
import warnings
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add src/ to sys.path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Pin client options so a developer's environment cannot change test behaviour
os.environ["CLUBCACHE_BOT"] = "true"
os.environ["CLUBCACHE_SEED_VOICE_CONNECTIONS"] = "false"
os.environ["CLUBCACHE_USER_CACHE_LIMIT"] = "0"
os.environ.pop("CLUBCACHE_CONFIG", None)

# Silence deprecation warnings surfaced from third-party dependencies during tests
warnings.filterwarnings(
    "ignore", category=DeprecationWarning, module=r"^discord\\.player$"
)
warnings.filterwarnings("ignore", "'audioop' is deprecated", DeprecationWarning)

from clubcache.client import ClubClient  # noqa: E402
from clubcache.config.client import ClientOptions  # noqa: E402
from clubcache.structures.permission import PERMISSIONS  # noqa: E402

IDS = SimpleNamespace(
    club=100000000000000000,
    owner=200000000000000001,
    member=200000000000000002,
    stranger=200000000000000009,
    mod_role=300000000000000001,
    admin_role=300000000000000002,
    text=400000000000000001,
    voice=400000000000000002,
    category=400000000000000003,
)

BASE_ALLOW = PERMISSIONS["read_messages"] | PERMISSIONS["send_messages"]


@pytest.fixture
def ids():
    return IDS


@pytest.fixture
def make_options():
    def build(**client_cfg):
        return ClientOptions({"clubcache": {"client": client_cfg}})

    return build


@pytest.fixture
def client(make_options):
    return ClubClient(make_options())


@pytest.fixture
def make_club_payload():
    def build(**overrides):
        payload = {
            "id": str(IDS.club),
            "name": "Test Club",
            "owner_id": str(IDS.owner),
            "region": "us-east",
            "verification_level": 1,
            "member_count": 2,
            "joined_at": "2020-01-01T00:00:00+00:00",
            "features": ["INVITE_SPLASH"],
            "roles": [
                {"id": str(IDS.club), "name": "@everyone", "permissions": BASE_ALLOW, "position": 0},
                {
                    "id": str(IDS.mod_role),
                    "name": "mod",
                    "permissions": PERMISSIONS["manage_messages"],
                    "position": 1,
                },
                {
                    "id": str(IDS.admin_role),
                    "name": "admin",
                    "permissions": PERMISSIONS["administrator"],
                    "position": 2,
                },
            ],
            "channels": [
                {"id": str(IDS.category), "type": 4, "name": "General", "position": 0},
                {
                    "id": str(IDS.text),
                    "type": 0,
                    "name": "chat",
                    "position": 1,
                    "parent_id": str(IDS.category),
                    "permission_overwrites": [],
                },
                {"id": str(IDS.voice), "type": 2, "name": "Lounge", "position": 2, "bitrate": 64000},
            ],
            "members": [
                {
                    "user": {"id": str(IDS.owner), "username": "owner", "discriminator": "0001"},
                    "roles": [],
                    "joined_at": "2020-01-01T00:00:00+00:00",
                },
                {
                    "user": {"id": str(IDS.member), "username": "member", "discriminator": "0002"},
                    "roles": [str(IDS.mod_role)],
                    "nick": "membo",
                    "joined_at": "2020-02-01T00:00:00+00:00",
                },
            ],
            "presences": [],
            "voice_states": [],
        }
        payload.update(overrides)
        return payload

    return build


@pytest.fixture
def club(client, make_club_payload):
    return client.club_create(make_club_payload())
