"""
Cache key generation utilities for Slotkeeper.

Availability rule caches are keyed by host and calendar date; booking data is
never cached.
"""


def generate_cache_key(key, namespace=None, version=None):
    """
    Generate a standardized cache key.

    Args:
        key (str): Base cache key
        namespace (str): Optional namespace
        version (str): Optional version

    Returns:
        str: Formatted cache key
    """
    parts = []
    if namespace:
        parts.append(namespace)

    parts.append(str(key))

    if version:
        parts.append(f"v{version}")

    return ":".join(parts)


def availability_version_key(host_id):
    """Key holding the current cache generation of a host's availability rules."""
    return generate_cache_key(str(host_id), namespace="availability_version")


def availability_rules_key(host_id, calendar_date, version=None):
    """Key for the resolved weekly rules / override of one host on one date."""
    return generate_cache_key(
        f"{host_id}:{calendar_date.isoformat()}", namespace="availability", version=version
    )
