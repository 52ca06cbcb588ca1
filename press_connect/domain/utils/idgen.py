from ulid import ULID


def new_ulid(prefix: str | None = None) -> str:
    value = str(ULID()).lower()
    return f"{prefix}{value}" if prefix else value


def new_user_id() -> str:
    return new_ulid("us_")


def new_credential_id() -> str:
    return new_ulid("oc_")


def new_session_key() -> str:
    return new_ulid("se_")


def new_recording_id() -> str:
    return new_ulid("rc_")


def new_snapshot_id() -> str:
    return new_ulid("sn_")
