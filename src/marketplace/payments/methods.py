"""Public payment-method lookup shown to buyers at checkout."""

from protean.utils.globals import current_domain

from marketplace.config import DEFAULT_COMMISSION_RATE
from marketplace.domain import logger
from marketplace.payments.settings import PaymentMethod, PaymentSettings

DEFAULT_WALLET_INSTRUCTIONS = "Realiza el pago escaneando el código QR o enviando al número de teléfono indicado."

_DISPLAY_NAMES = {
    PaymentMethod.STRIPE.value: "Tarjeta de Crédito/Débito",
    PaymentMethod.YAPE.value: "Yape",
    PaymentMethod.PLIN.value: "Plin",
}


def _empty_result() -> dict:
    return {
        "methods": [],
        "default_method": None,
        "commission_rate": DEFAULT_COMMISSION_RATE,
    }


def _describe(settings: PaymentSettings, method: str) -> dict:
    entry = {"id": method, "name": _DISPLAY_NAMES[method], "type": method, "enabled": True}
    if method != PaymentMethod.STRIPE.value:
        entry["phone_number"] = getattr(settings, f"{method}_phone_number")
        entry["qr_code"] = getattr(settings, f"{method}_qr_code")
        entry["instructions"] = getattr(settings, f"{method}_instructions") or DEFAULT_WALLET_INSTRUCTIONS
    return entry


def payment_methods(curator_id) -> dict:
    """Enabled methods for a curator, with display metadata and commission rate.

    Never raises: a missing settings record or a failed lookup yields an empty
    method list and the default commission rate.
    """
    try:
        settings = current_domain.repository_for(PaymentSettings).find_for_curator(curator_id)
        if settings is None:
            return _empty_result()

        methods = [_describe(settings, method) for method in settings.enabled_methods()]
        rate = settings.commission_rate if settings.commission_rate is not None else DEFAULT_COMMISSION_RATE
        return {
            "methods": methods,
            "default_method": settings.default_payment_method,
            "commission_rate": rate,
        }
    except Exception:
        logger.exception("payment_methods.lookup_failed", curator_id=str(curator_id))
        return _empty_result()
