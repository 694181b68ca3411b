import secrets


def new_property_id() -> str:
    """12 url-safe chars (9 random bytes); used as the share-link slug."""
    return secrets.token_urlsafe(9)
