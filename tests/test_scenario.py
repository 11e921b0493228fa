import unittest
from unittest.mock import MagicMock

import pytest

from litewire import Container


class Config:
    def __init__(self, redis_host="127.0.0.1", redis_port=6379):
        self.redis_host = redis_host
        self.redis_port = redis_port


class Redis:
    def __init__(self, host="localhost", port=6379):
        self.host = host
        self.port = port


class Validator:
    def __init__(self, config: Config, strict: bool = False):
        self.config = config
        self.strict = strict


class SessionStore:
    def __init__(self, redis: Redis, validator: Validator, ttl=3600):
        self.redis = redis
        self.validator = validator
        self.ttl = ttl


class StripeSdk:
    def pay(self, amount_usd: float, reference: str) -> bool:
        return True


class PaymentLogger:
    def info(self, msg: object, *args: object) -> None:
        pass


class StripeAdapter:
    def __init__(self, sdk: StripeSdk, logger: PaymentLogger, usd_per_cent: float = 0.01) -> None:
        self._sdk = sdk
        self._logger = logger
        self._usd_per_cent = usd_per_cent

    def charge(self, order_id: str, amount_cents: int) -> None:
        self._logger.info("adapting to stripe sdk api")
        amount_usd = amount_cents * self._usd_per_cent
        if not self._sdk.pay(amount_usd, reference=order_id):
            msg = "payment failed"
            raise RuntimeError(msg)


class CheckoutService:
    def __init__(self, payments: StripeAdapter) -> None:
        self._payments = payments

    def checkout(self, order_id: str, amount_cents: int) -> None:
        self._payments.charge(order_id, amount_cents)


class TestApplicationWiring(unittest.TestCase):
    def test_validator_gets_registered_config_and_extra_param(self):
        c = Container()
        config = Config()

        c.set("config", config)
        c.set("validator", Validator, {"strict": True})

        validator = c.resolve("validator")
        assert isinstance(validator, Validator)
        assert validator.config is config
        assert validator.strict is True

    def test_type_name_string_autowires_like_class(self):
        c = Container({"config": Config()})
        c.set("validator", f"{__name__}.Validator", {"strict": True})

        validator = c["validator"]
        assert isinstance(validator, Validator)
        assert validator.config is c["config"]
        assert validator.strict is True

    def test_services_wired_from_factories_and_autowiring(self):
        c = Container(
            {
                "config": Config(redis_host="10.0.0.5"),
                "redis": lambda cont: Redis(cont["config"].redis_host, cont["config"].redis_port),
                "validator": Validator,
            }
        )
        c.set("sessions", SessionStore, {"ttl": 60})

        sessions = c["sessions"]
        assert sessions.redis is c["redis"]
        assert sessions.redis.host == "10.0.0.5"
        assert sessions.validator is c["validator"]
        assert sessions.validator.strict is False
        assert sessions.ttl == 60

    def test_lazy_replica_connection_is_built_per_lookup(self):
        c = Container({"config": Config(redis_host="replica.local")})
        c.set_lazy("redis", lambda cont: Redis(cont["config"].redis_host))

        first = c["redis"]
        second = c["redis"]
        assert first.host == "replica.local"
        assert first is not second

    def test_adapter_chain_with_registered_collaborators(self):
        sdk = MagicMock(spec=StripeSdk)
        sdk.pay.return_value = True
        logger = MagicMock(spec=PaymentLogger)

        c = Container({"sdk": sdk, "logger": logger})
        c.set("checkout", CheckoutService)

        c["checkout"].checkout("order-1", 250)

        sdk.pay.assert_called_once()
        assert sdk.pay.call_args.args[0] == pytest.approx(2.5)
        assert sdk.pay.call_args.kwargs == {"reference": "order-1"}
        logger.info.assert_called_once_with("adapting to stripe sdk api")
        assert "payments" not in c
        assert "StripeAdapter" not in c
