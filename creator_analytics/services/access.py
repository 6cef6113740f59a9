from creator_analytics.errors import Forbidden


def can_access(caller_id, caller_role: str, creator) -> bool:
    """Admins see every creator; users only the ones they own."""
    return caller_role == "admin" or str(creator.user_id) == str(caller_id)

def ensure_can_access(caller_id, caller_role: str, creator) -> None:
    if not can_access(caller_id, caller_role, creator):
        raise Forbidden()

def visible_owner(caller_id, caller_role: str):
    """Owner filter for listing queries: None means every owner."""
    return None if caller_role == "admin" else caller_id
