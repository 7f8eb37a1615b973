import secrets
import time


def generate_id(prefix: str) -> str:
    """Sortable-ish string id, e.g. 'rider_1718000000000_3fa9c1'."""
    return f"{prefix}_{int(time.time() * 1000)}_{secrets.token_hex(3)}"
