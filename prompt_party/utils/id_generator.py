"""Generates guest player ids for clients that join without an auth identity."""
import secrets


def generate_guest_id() -> str:
    """Generate a guest player id such as ``guest-3f9a0c12b4d7``.

    Returns:
        A random guest id string.
    """
    return f"guest-{secrets.token_hex(6)}"
