"""Unit tests for configuration and environment resolution."""
import pytest

from oak_sdk.api import create_oak_client
from oak_sdk.core.config import ConfigError, OakConfig, OakParameters, load_oak_config
from oak_sdk.core.environment import (
    build_environment,
    get_environment_config,
    is_test_environment,
    resolve_base_url,
)

SANDBOX_URL = "https://sandbox.example.com"
PRODUCTION_URL = "https://production.example.com"

BASE_VARIABLES = {
    "OAK_CLIENT_ID": "client-id",
    "OAK_CLIENT_SECRET": "client-secret",
    "CROWDSPLIT_SANDBOX_URL": SANDBOX_URL,
    "CROWDSPLIT_PRODUCTION_URL": PRODUCTION_URL,
}


class TestEnvironmentResolution:
    def test_sandbox_config_allows_test_operations(self):
        config = get_environment_config("sandbox", BASE_VARIABLES)
        assert config.api_url == SANDBOX_URL
        assert config.allows_test_operations is True

    def test_production_config_disallows_test_operations(self):
        config = get_environment_config("production", BASE_VARIABLES)
        assert config.api_url == PRODUCTION_URL
        assert config.allows_test_operations is False

    @pytest.mark.parametrize(
        "environment,key",
        [("sandbox", "CROWDSPLIT_SANDBOX_URL"), ("production", "CROWDSPLIT_PRODUCTION_URL")],
    )
    def test_missing_url_variable(self, environment, key):
        variables = {k: v for k, v in BASE_VARIABLES.items() if k != key}
        with pytest.raises(ConfigError) as exc_info:
            get_environment_config(environment, variables)
        assert str(exc_info.value) == (
            f"Missing required environment variable: {key} for {environment} environment"
        )

    def test_unknown_environment(self):
        with pytest.raises(ConfigError):
            get_environment_config("staging", BASE_VARIABLES)

    def test_custom_url_wins(self):
        assert resolve_base_url("production", "https://custom.example.com/", {}) == (
            "https://custom.example.com"
        )
        assert resolve_base_url("sandbox", None, BASE_VARIABLES) == SANDBOX_URL

    def test_is_test_environment(self):
        assert is_test_environment("sandbox") is True
        assert is_test_environment("production") is False


class TestEnvFiles:
    def test_build_environment_layers_sources(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "# comment\nOAK_CLIENT_ID=from-file\nOAK_CLIENT_SECRET='quoted secret'\nBROKEN\n",
            encoding="utf-8",
        )

        variables = build_environment(
            env_file=str(env_file),
            base={"OAK_CLIENT_ID": "from-base"},
            overrides={"OAK_ENVIRONMENT": "production"},
        )

        assert variables.variables.get("OAK_CLIENT_ID") == "from-base"
        assert variables.variables.get("OAK_CLIENT_SECRET") == "quoted secret"
        assert variables.variables.get("OAK_ENVIRONMENT") == "production"
        assert variables.variables.get("BROKEN") is None

    def test_missing_env_file_is_ignored(self, tmp_path):
        variables = build_environment(env_file=str(tmp_path / "absent.env"), base={})
        assert dict(variables.variables) == {}


class TestOakConfig:
    def test_from_mapping_defaults_to_sandbox(self):
        config = OakConfig.from_mapping(BASE_VARIABLES)

        assert config.client_id == "client-id"
        assert config.client_secret == "client-secret"
        assert config.environment == "sandbox"
        assert config.base_url == SANDBOX_URL
        assert config.retry_options.max_number_of_retries == 0

    def test_secret_is_not_in_repr(self):
        assert "client-secret" not in repr(OakConfig.from_mapping(BASE_VARIABLES))

    def test_production_and_custom_base_url(self):
        config = OakConfig.from_mapping(
            {**BASE_VARIABLES, "OAK_ENVIRONMENT": "Production", "OAK_BASE_URL": "https://x.test/"}
        )
        assert config.environment == "production"
        assert config.base_url == "https://x.test"

    @pytest.mark.parametrize("missing", ["OAK_CLIENT_ID", "OAK_CLIENT_SECRET"])
    def test_missing_credentials(self, missing):
        variables = {k: v for k, v in BASE_VARIABLES.items() if k != missing}
        with pytest.raises(ConfigError, match=missing):
            OakConfig.from_mapping(variables)

    def test_invalid_environment(self):
        with pytest.raises(ConfigError, match="OAK_ENVIRONMENT"):
            OakConfig.from_mapping({**BASE_VARIABLES, "OAK_ENVIRONMENT": "qa"})

    def test_retry_overrides_from_variables(self):
        config = OakConfig.from_mapping(
            {
                **BASE_VARIABLES,
                "OAK_MAX_NUMBER_OF_RETRIES": "3",
                "OAK_RETRY_DELAY_MS": "250",
                "OAK_RETRY_MAX_DELAY_MS": "4000",
            }
        )
        assert config.retry_options.max_number_of_retries == 3
        assert config.retry_options.delay == 250
        assert config.retry_options.max_delay == 4000
        assert config.retry_options.backoff_factor == 2

    @pytest.mark.parametrize("value", ["three", "-1"])
    def test_invalid_retry_count(self, value):
        with pytest.raises(ConfigError, match="OAK_MAX_NUMBER_OF_RETRIES"):
            OakConfig.from_mapping({**BASE_VARIABLES, "OAK_MAX_NUMBER_OF_RETRIES": value})

    def test_with_retry_overrides_returns_new_config(self):
        config = OakConfig.from_mapping(BASE_VARIABLES)

        updated = config.with_retry_overrides({"max_number_of_retries": 2})

        assert updated.retry_options.max_number_of_retries == 2
        assert config.retry_options.max_number_of_retries == 0
        assert updated.base_url == config.base_url

    def test_empty_base_url_is_rejected(self):
        with pytest.raises(ConfigError):
            OakConfig(client_id="a", client_secret="b", base_url="")

    def test_load_oak_config_keyword_parameters_win(self):
        config = load_oak_config(
            env_file=None,
            base=BASE_VARIABLES,
            client_id="explicit-id",
            environment="production",
            max_number_of_retries=1,
        )
        assert config.client_id == "explicit-id"
        assert config.base_url == PRODUCTION_URL
        assert config.retry_options.max_number_of_retries == 1

    def test_parameter_bundle(self):
        config = load_oak_config(
            env_file=None,
            base=BASE_VARIABLES,
            parameters=OakParameters(base_url="https://bundle.test", retry_delay_ms=10),
        )
        assert config.base_url == "https://bundle.test"
        assert config.retry_options.delay == 10


class TestCreateOakClient:
    def test_rejects_config_plus_parameters(self):
        config = OakConfig.from_mapping(BASE_VARIABLES)
        with pytest.raises(ValueError):
            create_oak_client(config=config, client_id="other")

    def test_applies_partial_retry_overrides(self, async_http):
        config = OakConfig.from_mapping(BASE_VARIABLES)

        client = create_oak_client(
            config=config,
            http_client=async_http,
            retry_options={"max_number_of_retries": 4, "retry_on_status": [503]},
        )

        assert client.retry_options.max_number_of_retries == 4
        assert client.retry_options.retry_on_status == frozenset({503})
        assert client.retry_options.delay == 500
