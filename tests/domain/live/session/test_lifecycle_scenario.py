"""End-to-end lifecycle over in-memory stores and a fake provider."""

from press_connect.domain.identity import IdentityService
from press_connect.domain.live.session import BroadcastOrchestrator, CreateSessionParams
from press_connect.schemas import SessionState


async def test_register_create_start_end(
    identity: IdentityService, orchestrator: BroadcastOrchestrator, credential_store, provider
):
    # A registers and obtains token T
    registered = await identity.register("user_a", "a@example.com", "password-a")
    claims = identity.verify_token(registered.token)
    assert claims is not None
    user_id = claims.user_id
    await credential_store.put(user_id, "youtube", "ya29.a")

    # A creates a session; provider returns B1/S1/K1/U1
    descriptor = await orchestrator.create_session(user_id, CreateSessionParams())
    assert (descriptor.broadcast_id, descriptor.stream_id) == ("B1", "S1")
    assert (descriptor.ingest_key, descriptor.ingest_url) == ("K1", "U1")

    session = await orchestrator.get_session(user_id, descriptor.session_id)
    assert session.status == SessionState.CREATED

    started = await orchestrator.start_session(user_id, descriptor.session_id)
    assert started.status == SessionState.ACTIVE
    assert started.started_at is not None

    await orchestrator.end_session(user_id, descriptor.session_id)
    ended = await orchestrator.get_session(user_id, descriptor.session_id)
    assert ended.status == SessionState.ENDED
    assert ended.ended_at is not None

    # Second end: no error, still ended, no second remote call
    ack = await orchestrator.end_session(user_id, descriptor.session_id)
    assert ack.status == SessionState.ENDED
    again = await orchestrator.get_session(user_id, descriptor.session_id)
    assert again.status == SessionState.ENDED
    assert again.ended_at == ended.ended_at
    assert provider.calls["transition_broadcast"] == 1
