"""PaymentSettings aggregate — which payment methods a curator accepts.

Each curator owns at most one settings record. It is created lazily with the
platform defaults (card payments on, wallet transfers off, 10% commission).
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String, Text

from marketplace.config import DEFAULT_COMMISSION_RATE
from marketplace.domain import marketplace
from marketplace.payments.events import PaymentSettingsUpdated
from marketplace.shared.money import validate_commission_rate


class PaymentMethod(Enum):
    STRIPE = "stripe"
    YAPE = "yape"
    PLIN = "plin"


MANUAL_PAYMENT_METHODS = {PaymentMethod.YAPE.value, PaymentMethod.PLIN.value}

# Fields a curator may change through UpdatePaymentSettings
MUTABLE_FIELDS = frozenset(
    {
        "stripe_enabled",
        "yape_enabled",
        "yape_phone_number",
        "yape_qr_code",
        "yape_instructions",
        "plin_enabled",
        "plin_phone_number",
        "plin_qr_code",
        "plin_instructions",
        "default_payment_method",
        "commission_rate",
    }
)


@marketplace.aggregate
class PaymentSettings:
    curator_id = Identifier(required=True)
    stripe_enabled = Boolean(default=True)
    yape_enabled = Boolean(default=False)
    yape_phone_number = String(max_length=50)
    yape_qr_code = String(max_length=500)  # asset reference
    yape_instructions = Text()
    plin_enabled = Boolean(default=False)
    plin_phone_number = String(max_length=50)
    plin_qr_code = String(max_length=500)
    plin_instructions = Text()
    default_payment_method = String(choices=PaymentMethod, default=PaymentMethod.STRIPE.value)
    commission_rate = Float(default=DEFAULT_COMMISSION_RATE)
    updated_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def commission_rate_must_be_a_fraction(self):
        if self.commission_rate is not None and not 0 <= self.commission_rate <= 1:
            raise ValidationError({"commission_rate": ["Commission rate must be between 0 and 1"]})

    @classmethod
    def defaults_for(cls, curator_id, updated_by=None):
        now = datetime.now(UTC)
        return cls(
            curator_id=curator_id,
            stripe_enabled=True,
            yape_enabled=False,
            plin_enabled=False,
            default_payment_method=PaymentMethod.STRIPE.value,
            commission_rate=DEFAULT_COMMISSION_RATE,
            updated_by=updated_by,
            created_at=now,
            updated_at=now,
        )

    def is_enabled(self, method: str) -> bool:
        return bool(getattr(self, f"{method}_enabled", False))

    def enabled_methods(self) -> list[str]:
        return [method.value for method in PaymentMethod if self.is_enabled(method.value)]

    def apply_changes(self, changes: dict, updated_by):
        """Apply a partial update restricted to ``MUTABLE_FIELDS``."""
        unknown = sorted(set(changes) - MUTABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in unknown})

        if "commission_rate" in changes:
            changes = {**changes, "commission_rate": float(validate_commission_rate(changes["commission_rate"]))}
        if "default_payment_method" in changes:
            allowed = {method.value for method in PaymentMethod}
            if changes["default_payment_method"] not in allowed:
                raise ValidationError({"default_payment_method": [f"Must be one of {', '.join(sorted(allowed))}"]})

        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_by = updated_by
        self.updated_at = datetime.now(UTC)

        self.raise_(
            PaymentSettingsUpdated(
                settings_id=str(self.id),
                curator_id=str(self.curator_id),
                changed_fields=",".join(sorted(changes)),
                updated_by=str(updated_by),
                updated_at=self.updated_at,
            )
        )


@marketplace.repository(part_of=PaymentSettings)
class PaymentSettingsRepository:
    def find_for_curator(self, curator_id) -> PaymentSettings | None:
        results = self._dao.query.filter(curator_id=str(curator_id)).all().items
        return results[0] if results else None
