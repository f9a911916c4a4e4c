"""Application tests for payment settings management and the public method lookup."""

import json

import pytest
from marketplace.domain import marketplace
from marketplace.payments.management import UpdatePaymentSettings, get_or_create_settings
from marketplace.payments.methods import DEFAULT_WALLET_INSTRUCTIONS, payment_methods
from marketplace.payments.settings import PaymentSettings
from marketplace.shared.errors import NotFoundError
from protean import current_domain
from protean.exceptions import ValidationError


def _update(changes, user_id="curator-user-1"):
    return current_domain.process(
        UpdatePaymentSettings(user_id=user_id, changes=json.dumps(changes)),
        asynchronous=False,
    )


@pytest.fixture()
def curator_id(register_curator):
    return register_curator()


class TestGetOrCreate:
    def test_creates_defaults_once(self, curator_id):
        first = get_or_create_settings(curator_id, updated_by="curator-user-1")
        second = get_or_create_settings(curator_id)

        assert first.id == second.id
        assert second.stripe_enabled is True
        assert second.yape_enabled is False
        assert second.commission_rate == 0.10
        assert len(current_domain.repository_for(PaymentSettings)._dao.query.all().items) == 1


class TestUpdatePaymentSettings:
    def test_creates_and_updates(self, curator_id):
        _update({"plin_enabled": True, "plin_phone_number": "+51 955 111 222", "commission_rate": 0.2})

        settings = current_domain.repository_for(PaymentSettings).find_for_curator(curator_id)
        assert settings.plin_enabled is True
        assert settings.plin_phone_number == "+51 955 111 222"
        assert settings.commission_rate == 0.2
        assert settings.stripe_enabled is True
        assert settings.updated_by == "curator-user-1"

    def test_unknown_field_is_rejected(self, curator_id):
        with pytest.raises(ValidationError):
            _update({"curator_id": "someone-else"})

    def test_rate_out_of_range(self, curator_id):
        with pytest.raises(ValidationError):
            _update({"commission_rate": 1.2})

    def test_requires_curator_profile(self):
        with pytest.raises(NotFoundError):
            _update({"yape_enabled": True}, user_id="buyer-1")


class TestPaymentMethodsLookup:
    def test_no_settings_row(self, curator_id):
        result = payment_methods(curator_id)
        assert result == {"methods": [], "default_method": None, "commission_rate": 0.10}

    def test_lists_enabled_methods_with_metadata(self, curator_id):
        _update(
            {
                "yape_enabled": True,
                "yape_phone_number": "+51 987 654 321",
                "yape_qr_code": "qr/yape-alpaca.png",
                "plin_enabled": True,
                "plin_instructions": "Envía el pago al número indicado.",
                "commission_rate": 0.08,
            }
        )

        result = payment_methods(curator_id)

        assert [m["id"] for m in result["methods"]] == ["stripe", "yape", "plin"]
        yape = result["methods"][1]
        assert yape["phone_number"] == "+51 987 654 321"
        assert yape["qr_code"] == "qr/yape-alpaca.png"
        assert yape["instructions"] == DEFAULT_WALLET_INSTRUCTIONS
        assert result["methods"][2]["instructions"] == "Envía el pago al número indicado."
        assert result["methods"][0]["name"] == "Tarjeta de Crédito/Débito"
        assert result["commission_rate"] == 0.08
        assert result["default_method"] == "stripe"

    def test_never_fails(self, curator_id, monkeypatch):
        def _broken(*args, **kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(marketplace, "repository_for", _broken)

        result = payment_methods(curator_id)
        assert result["methods"] == []
        assert result["commission_rate"] == 0.10
