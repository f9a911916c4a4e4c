"""Domain events for the Curator aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Curator")
class CuratorRegistered:
    """A user opened a curator store."""

    __version__ = "v1"

    curator_id = Identifier(required=True)
    user_id = Identifier(required=True)
    store_name = String(required=True)
    slug = String(required=True)
    registered_at = DateTime(required=True)
