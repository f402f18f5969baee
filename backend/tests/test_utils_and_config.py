"""
Unit tests for configuration, database URL parsing, date utilities and models.
"""

from datetime import UTC

import pytest

from src.core.config import Settings
from src.core.exceptions import ConfigurationError
from src.core.utils.date_utils import utcnow
from src.database.mongodb import parse_database_name
from src.models.holding import EnrichedHolding, Holding, HoldingCreate

# ===== Settings Tests =====


class TestSettings:
    """Test environment-driven settings"""

    def test_defaults(self, monkeypatch):
        for name in ("MONGODB_URL", "MONGO_URI", "SECRET_KEY", "JWT_SECRET", "PORT"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.port == 5000
        assert settings.token_expire_days == 7
        assert settings.bcrypt_rounds == 12
        assert settings.reference_currency == "usd"
        assert settings.rate_limit_storage_uri == "memory://"
        assert settings.secret_key is None
        assert "*" not in settings.cors_origins

    def test_mongo_uri_alias(self, monkeypatch):
        """Test MONGO_URI is accepted for the database URL"""
        monkeypatch.delenv("MONGODB_URL", raising=False)
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017/krypton")

        settings = Settings(_env_file=None)

        assert settings.mongodb_url == "mongodb://db:27017/krypton"

    def test_jwt_secret_alias(self, monkeypatch):
        """Test JWT_SECRET is accepted for the signing key"""
        monkeypatch.delenv("SECRET_KEY", raising=False)
        monkeypatch.setenv("JWT_SECRET", "s3cret")

        assert Settings(_env_file=None).secret_key == "s3cret"

    def test_production_flags(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert settings.is_production is True
        assert settings.is_development is False


# ===== MongoDB URL Tests =====


class TestParseDatabaseName:
    """Test database name extraction"""

    @pytest.mark.parametrize(
        "url, expected",
        [
            ("mongodb://localhost:27017/krypton_db", "krypton_db"),
            ("mongodb://user:pw@host:27017/krypton?authSource=admin", "krypton"),
            ("mongodb+srv://cluster.example.net/krypton/", "krypton"),
        ],
    )
    def test_valid(self, url, expected):
        assert parse_database_name(url) == expected

    @pytest.mark.parametrize(
        "url",
        ["mongodb://localhost:27017", "mongodb://localhost:27017/?retryWrites=true"],
    )
    def test_missing_name(self, url):
        with pytest.raises(ConfigurationError):
            parse_database_name(url)


# ===== Date Utility Tests =====


class TestUtcNow:
    def test_timezone_aware_utc(self):
        assert utcnow().tzinfo == UTC


# ===== Model Tests =====


class TestHoldingModels:
    """Test wire aliases and enrichment arithmetic"""

    def test_camel_case_aliases(self):
        holding = Holding(crypto_id="bitcoin", amount=2.5, purchase_price=100.0)

        dumped = holding.model_dump(by_alias=True)

        assert dumped["cryptoId"] == "bitcoin"
        assert dumped["purchasePrice"] == 100.0
        assert "addedAt" in dumped

    def test_create_accepts_camel_case(self):
        create = HoldingCreate.model_validate({"cryptoId": "bitcoin", "amount": "2.5"})

        assert create.crypto_id == "bitcoin"
        assert create.amount == "2.5"

    def test_enriched_with_price(self):
        holding = Holding(crypto_id="bitcoin", amount=2.0, purchase_price=100.0)

        enriched = EnrichedHolding.from_holding(holding, 150.0)

        assert enriched.current_value == 300.0
        assert enriched.profit_loss == 100.0
        assert enriched.price_available is True
        assert enriched.added_at == holding.added_at

    def test_enriched_without_price(self):
        holding = Holding(crypto_id="bitcoin", amount=2.0, purchase_price=100.0)

        enriched = EnrichedHolding.from_holding(holding, None)

        assert (enriched.current_price, enriched.current_value, enriched.profit_loss) == (
            0,
            0,
            0,
        )
        assert enriched.price_available is False

    @pytest.mark.parametrize("amount", [True, False])
    def test_create_rejects_boolean_amount(self, amount):
        with pytest.raises(ValueError):
            HoldingCreate.model_validate({"cryptoId": "bitcoin", "amount": amount})

    def test_create_keeps_integer_amount(self):
        assert HoldingCreate(crypto_id="bitcoin", amount=2).amount == 2

    def test_amount_must_be_positive(self):
        with pytest.raises(ValueError):
            Holding(crypto_id="bitcoin", amount=0)
