from .credential_store import CredentialStore, is_valid

__all__ = ["CredentialStore", "is_valid"]
