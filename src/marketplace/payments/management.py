"""Curator-side payment settings — lazy creation and partial updates."""

import json

from protean import handle
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain

from marketplace.curator.curator import Curator
from marketplace.domain import logger, marketplace
from marketplace.payments.settings import PaymentSettings


def get_or_create_settings(curator_id, updated_by=None) -> PaymentSettings:
    """Return the curator's settings, creating the default record on first access."""
    repo = current_domain.repository_for(PaymentSettings)
    settings = repo.find_for_curator(curator_id)
    if settings is None:
        settings = PaymentSettings.defaults_for(curator_id, updated_by=updated_by)
        repo.add(settings)
        logger.info("payment_settings.created", curator_id=str(curator_id))
    return settings


@marketplace.command(part_of="PaymentSettings")
class UpdatePaymentSettings:
    user_id = Identifier(required=True)
    changes = Text(required=True)  # JSON: field -> value, limited to MUTABLE_FIELDS


@marketplace.command_handler(part_of=PaymentSettings)
class PaymentSettingsHandler:
    @handle(UpdatePaymentSettings)
    def update_settings(self, command):
        changes = json.loads(command.changes) if isinstance(command.changes, str) else command.changes
        curator = current_domain.repository_for(Curator).for_user(command.user_id)

        settings = get_or_create_settings(curator.id, updated_by=command.user_id)
        settings.apply_changes(changes, updated_by=command.user_id)
        current_domain.repository_for(PaymentSettings).add(settings)

        logger.info(
            "payment_settings.updated",
            curator_id=str(curator.id),
            fields=sorted(changes),
        )
        return str(settings.id)
