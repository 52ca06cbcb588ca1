"""Postgres-backed store tests. Skipped unless POSTGRES_URL_TEST is set."""

import pytest

from press_connect.domain.identity import UserStore
from press_connect.domain.live.media import MediaStore
from press_connect.domain.live.session import SessionRegistry
from press_connect.schemas import SessionState
from press_connect.utils.app_errors import AppError, AppErrorCode

pytestmark = pytest.mark.integration


async def make_user(pg_manager, username: str = "alice") -> str:
    user = await UserStore(pg_manager).create(username, f"{username}@example.com", "$2b$04$hash")
    return user.user_id


async def make_session(registry: SessionRegistry, owner: str, n: int = 1):
    return await registry.create(
        owner_user_id=owner,
        remote_broadcast_id=f"B{n}",
        remote_stream_id=f"S{n}",
        ingest_key=f"K{n}",
        ingest_url="rtmp://a.rtmp.youtube.com/live2",
        title=f"Live {n}",
    )


class TestUserStore:
    async def test_create_and_lookup(self, pg_manager):
        store = UserStore(pg_manager)

        user = await store.create("alice", "alice@example.com", "hash")

        assert (await store.get_by_username("alice")).user_id == user.user_id  # type: ignore[union-attr]
        assert (await store.get_by_email("alice@example.com")).user_id == user.user_id  # type: ignore[union-attr]
        assert (await store.get_by_id(user.user_id)) is not None

    async def test_unique_violation_is_duplicate_user(self, pg_manager):
        store = UserStore(pg_manager)
        await store.create("alice", "alice@example.com", "hash")

        with pytest.raises(AppError) as exc_info:
            await store.create("alice", "other@example.com", "hash")

        assert exc_info.value.errcode == AppErrorCode.E_DUPLICATE_USER.value

    async def test_deactivated_user_hidden(self, pg_manager):
        store = UserStore(pg_manager)
        user = await store.create("alice", "alice@example.com", "hash")

        assert await store.deactivate(user.user_id) is True

        assert await store.get_by_username("alice") is None
        assert await store.get_by_id(user.user_id) is None
        assert await store.deactivate(user.user_id) is False


class TestSessionRegistry:
    async def test_create_get_and_transition(self, pg_manager):
        # Arrange
        owner = await make_user(pg_manager)
        registry = SessionRegistry(pg_manager)

        # Act
        session = await make_session(registry, owner)
        updated = await registry.set_status(
            session.session_key, SessionState.ACTIVE, started_at=session.created_at
        )

        # Assert
        assert session.status == SessionState.CREATED
        assert session.session_key.startswith("se_")
        assert updated.status == SessionState.ACTIVE
        assert updated.started_at is not None
        assert updated.updated_at >= session.updated_at
        fetched = await registry.get_by_key(session.session_key)
        assert fetched is not None
        assert fetched.status == SessionState.ACTIVE

    async def test_duplicate_remote_ids_conflict(self, pg_manager):
        owner = await make_user(pg_manager)
        registry = SessionRegistry(pg_manager)
        await make_session(registry, owner, 1)

        with pytest.raises(AppError) as exc_info:
            await make_session(registry, owner, 1)

        assert exc_info.value.errcode == AppErrorCode.E_CONFLICT.value
        assert exc_info.value.status_code == 409

    async def test_set_status_missing_session(self, pg_manager):
        registry = SessionRegistry(pg_manager)

        with pytest.raises(AppError) as exc_info:
            await registry.set_status("se_missing", SessionState.ENDED)

        assert exc_info.value.errcode == AppErrorCode.E_SESSION_NOT_FOUND.value

    async def test_set_status_guarded_by_expected_status(self, pg_manager):
        owner = await make_user(pg_manager)
        registry = SessionRegistry(pg_manager)
        session = await make_session(registry, owner)
        await registry.set_status(
            session.session_key, SessionState.ENDED, expected_status=SessionState.CREATED
        )

        stale = await registry.set_status(
            session.session_key, SessionState.ACTIVE, expected_status=SessionState.CREATED
        )
        missing = await registry.set_status(
            "se_missing", SessionState.ACTIVE, expected_status=SessionState.CREATED
        )

        assert stale is None
        assert missing is None
        fetched = await registry.get_by_key(session.session_key)
        assert fetched is not None
        assert fetched.status == SessionState.ENDED

    async def test_list_active_newest_first(self, pg_manager):
        owner = await make_user(pg_manager)
        other = await make_user(pg_manager, "bob")
        registry = SessionRegistry(pg_manager)
        first = await make_session(registry, owner, 1)
        second = await make_session(registry, owner, 2)
        ended = await make_session(registry, owner, 3)
        await registry.set_status(ended.session_key, SessionState.ENDED)
        await make_session(registry, other, 4)

        mine = await registry.list_active(owner)
        everyone = await registry.list_active()

        assert [s.session_key for s in mine] == [second.session_key, first.session_key]
        assert len(everyone) == 3

    async def test_delete_cascades_to_media(self, pg_manager):
        owner = await make_user(pg_manager)
        registry = SessionRegistry(pg_manager)
        media = MediaStore(pg_manager)
        session = await make_session(registry, owner)
        await media.insert_recording(session.session_key, owner, "a.mp4", "/rec/a.mp4")
        await media.insert_snapshot(session.session_key, owner, "f.jpg", "/snap/f.jpg")

        deleted = await registry.delete(session.session_key)

        assert deleted is not None
        assert await registry.get_by_key(session.session_key) is None
        assert await media.list_recordings(session.session_key) == []
        assert await media.list_snapshots(session.session_key) == []
        assert await registry.delete(session.session_key) is None
