"""Generates human-shareable room codes."""
import random
import string

# No 0/O or 1/I so codes survive being read aloud
_ALPHABET = "".join(c for c in string.ascii_uppercase + string.digits if c not in "01IO")


def generate_room_code(length: int = 6) -> str:
    """Generate a random uppercase room code.

    Args:
        length: Number of characters in the code. Defaults to 6.

    Returns:
        A random uppercase alphanumeric string.
    """
    return "".join(random.choices(_ALPHABET, k=length))
