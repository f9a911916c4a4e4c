"""Domain events for the PaymentSettings aggregate."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="PaymentSettings")
class PaymentSettingsUpdated:
    __version__ = "v1"

    settings_id = Identifier(required=True)
    curator_id = Identifier(required=True)
    changed_fields = String(required=True)
    updated_by = Identifier(required=True)
    updated_at = DateTime(required=True)
