import pytest

from clubcache.structures.permission import (
    ADMINISTRATOR,
    ALL,
    ALL_CLUB,
    ALL_TEXT,
    ALL_VOICE,
    PERMISSIONS,
    Permission,
    PermissionOverwrite,
)


def test_all_covers_every_capability():
    for bit in PERMISSIONS.values():
        assert ALL & bit
    assert Permission.all().allow == ALL
    assert ADMINISTRATOR == 1 << 3


def test_named_queries():
    perm = Permission(PERMISSIONS["send_messages"] | PERMISSIONS["read_messages"])

    assert perm.send_messages is True
    assert perm.read_messages is True
    assert perm.administrator is False
    assert perm.has("send_messages")
    assert not perm.has("ban_members")
    with pytest.raises(KeyError):
        perm.has("fly")


def test_permission_is_read_only():
    perm = Permission(1)

    with pytest.raises(AttributeError):
        perm.allow = 2
    with pytest.raises(AttributeError):
        perm.administrator = True
    assert perm.allow == 1


def test_accepts_numeric_strings():
    perm = Permission("8", "16")

    assert perm.allow == 8
    assert perm.deny == 16
    assert perm.administrator


def test_to_dict_marks_allow_and_deny():
    perm = Permission(PERMISSIONS["kick_members"], PERMISSIONS["ban_members"])

    assert perm.to_dict() == {"kick_members": True, "ban_members": False}
    assert perm.to_json() == {"allow": PERMISSIONS["kick_members"], "deny": PERMISSIONS["ban_members"]}


def test_equality_by_masks():
    assert Permission(3, 4) == Permission(3, 4)
    assert Permission(3) != Permission(3, 1)


def test_overwrite_normalizes_subject_type():
    role = PermissionOverwrite({"id": "11", "type": 0, "allow": "1024", "deny": 0})
    member = PermissionOverwrite({"id": 12, "type": "member", "allow": 0, "deny": 2048})

    assert role.id == 11 and role.type == "role"
    assert role.allow == 1024 and role.read_messages
    assert member.type == "member" and member.deny == 2048

    projected = role.to_json()
    assert projected["type"] == "role"
    assert projected["allow"] == 1024


def test_overwrite_ignores_merges():
    overwrite = PermissionOverwrite({"id": 1, "type": "role", "allow": 1, "deny": 0})

    overwrite.update({"id": 1, "allow": 2})

    assert overwrite.allow == 1


def test_group_masks():
    for group in (ALL_CLUB, ALL_TEXT, ALL_VOICE):
        assert group & ALL == group

    club_scope = Permission(ALL_CLUB)
    assert club_scope.manage_club and club_scope.view_club_insights
    assert not club_scope.send_messages

    text = Permission(ALL_TEXT)
    assert text.send_messages and text.read_message_history
    assert not text.voice_connect and not text.administrator

    voice = Permission(ALL_VOICE)
    assert voice.voice_connect and voice.voice_move_members and voice.stream
    assert not voice.send_messages
