# =============================================================================
# tests/test_builder.py - Layered Source Builder Tests
# =============================================================================
# Tests for core/configuration/builder.py:
# - source order per environment
# - developer secrets only in Development
# - Key Vault outcomes (skipped, not configured, failed, loaded)
# - vault timeout selection
#
# Fake vault factories from conftest.py replace the Azure SDK.
#
# Run with: pytest tests/test_builder.py -v
# =============================================================================

import pytest

from core.configuration.builder import (
    LayeredSourceBuilder,
    SourceOptions,
    VaultStatus,
    is_development,
)
from core.configuration.errors import ConfigurationSourceError
from core.configuration.sources import SourceKind
from tests.conftest import FailingVault, FakeVault


@pytest.fixture
def options(tmp_path, write_json):
    """Options with base + environment files and a dev secrets file on disk."""

    def _options(environment: str, environ: dict[str, str] | None = None) -> SourceOptions:
        write_json("appsettings.json", {"AppSettings": {"Environment": "base", "Database": {"CommandTimeout": 10}}})
        write_json(f"appsettings.{environment}.json", {"AppSettings": {"Environment": environment}})
        secrets = write_json("secrets.json", {"AppSettings": {"Security": {"JwtSecret": "dev-secret"}}})
        return SourceOptions(
            environment=environment,
            config_dir=tmp_path,
            dev_secrets_file=secrets,
            environ=environ or {},
        )

    return _options


class TestIsDevelopment:
    @pytest.mark.parametrize("name,expected", [
        ("Development", True),
        ("development", True),
        (" Development ", True),
        ("Production", False),
        ("Staging", False),
        ("Dev", False),
    ])
    def test_is_development(self, name, expected):
        assert is_development(name) is expected


# =============================================================================
# Source Order
# =============================================================================

class TestSourceOrder:
    """Sources are ordered lowest to highest precedence."""

    def test_development_order(self, options):
        vault = FakeVault()
        layered = LayeredSourceBuilder(
            options("Development", {"KeyVault__Url": "https://v.vault.azure.net"}), vault
        ).build()

        assert layered.kinds() == [
            SourceKind.FILE,
            SourceKind.ENVIRONMENT_FILE,
            SourceKind.DEV_SECRETS,
            SourceKind.ENV_VARS,
        ]
        assert [s.priority for s in layered.sources] == [0, 1, 2, 3]

    def test_production_order_with_vault(self, options):
        vault = FakeVault({"AppSettings:Security:JwtSecret": "vault-secret"})
        layered = LayeredSourceBuilder(
            options("Production", {"KeyVault__Url": "https://v.vault.azure.net"}), vault
        ).build()

        assert layered.kinds() == [
            SourceKind.FILE,
            SourceKind.ENVIRONMENT_FILE,
            SourceKind.ENV_VARS,
            SourceKind.VAULT,
        ]
        assert layered.vault_status is VaultStatus.LOADED

    def test_environment_file_overrides_base(self, options):
        raw = LayeredSourceBuilder(options("Staging"), FakeVault()).build().merge()

        assert raw["AppSettings:Environment"] == "Staging"
        assert raw["AppSettings:Database:CommandTimeout"] == "10"

    def test_env_vars_override_files(self, options):
        environ = {"AppSettings__Database__CommandTimeout": "99"}
        raw = LayeredSourceBuilder(options("Staging", environ), FakeVault()).build().merge()

        assert raw["AppSettings:Database:CommandTimeout"] == "99"

    def test_vault_overrides_everything(self, options):
        environ = {
            "KeyVault__Url": "https://v.vault.azure.net",
            "AppSettings__Security__JwtSecret": "env-secret",
        }
        vault = FakeVault({"AppSettings:Security:JwtSecret": "vault-secret"})

        raw = LayeredSourceBuilder(options("Production", environ), vault).build().merge()

        assert raw["AppSettings:Security:JwtSecret"] == "vault-secret"

    def test_missing_files_are_skipped(self, tmp_path):
        layered = LayeredSourceBuilder(
            SourceOptions(environment="Staging", config_dir=tmp_path, environ={"A": "1"}),
            FakeVault(),
        ).build()

        assert dict(layered.merge()) == {"A": "1"}

    def test_malformed_file_is_fatal(self, tmp_path):
        (tmp_path / "appsettings.json").write_text("{oops", encoding="utf-8")

        with pytest.raises(ConfigurationSourceError):
            LayeredSourceBuilder(SourceOptions(config_dir=tmp_path, environ={}), FakeVault()).build()


# =============================================================================
# Developer Secrets
# =============================================================================

class TestDeveloperSecrets:
    """Developer secrets never leak outside Development."""

    def test_loaded_in_development(self, options):
        raw = LayeredSourceBuilder(options("Development"), FakeVault()).build().merge()
        assert raw["AppSettings:Security:JwtSecret"] == "dev-secret"

    @pytest.mark.parametrize("environment", ["Staging", "Production"])
    def test_never_loaded_elsewhere(self, options, environment):
        layered = LayeredSourceBuilder(options(environment), FakeVault()).build()

        assert SourceKind.DEV_SECRETS not in layered.kinds()
        assert "AppSettings:Security:JwtSecret" not in layered.merge()


# =============================================================================
# Key Vault
# =============================================================================

class TestKeyVault:
    """Vault outcomes are explicit and never break the build stage."""

    def test_development_never_uses_vault(self, options):
        vault = FakeVault({"X": "y"})

        layered = LayeredSourceBuilder(
            options("Development", {"KeyVault__Url": "https://v.vault.azure.net"}), vault
        ).build()

        assert layered.vault_status is VaultStatus.SKIPPED
        assert vault.calls == []

    def test_not_configured_is_silent(self, options, caplog):
        vault = FakeVault()

        layered = LayeredSourceBuilder(options("Production"), vault).build()

        assert layered.vault_status is VaultStatus.NOT_CONFIGURED
        assert layered.warnings == []
        assert vault.calls == []
        assert not [r for r in caplog.records if r.levelname == "WARNING"]

    def test_blank_url_is_not_configured(self, options):
        layered = LayeredSourceBuilder(options("Production", {"KeyVault__Url": "  "}), FakeVault()).build()
        assert layered.vault_status is VaultStatus.NOT_CONFIGURED

    def test_url_from_file(self, options, write_json):
        opts = options("Staging")
        write_json("appsettings.Staging.json", {"KeyVault": {"Url": "https://file.vault.azure.net"}})
        vault = FakeVault()

        LayeredSourceBuilder(opts, vault).build()

        assert vault.calls[0][0] == "https://file.vault.azure.net"

    def test_unreachable_vault_downgraded_to_warning(self, options, caplog):
        vault = FailingVault()

        layered = LayeredSourceBuilder(
            options("Production", {"KeyVault__Url": "https://v.vault.azure.net"}), vault
        ).build()

        assert layered.vault_status is VaultStatus.FAILED
        assert SourceKind.VAULT not in layered.kinds()
        assert len(layered.warnings) == 1
        assert "Could not connect to Key Vault" in layered.warnings[0]
        assert any(r.levelname == "WARNING" and "Key Vault" in r.getMessage() for r in caplog.records)

    def test_other_errors_propagate(self, options):
        """Only VaultUnavailableError is downgraded."""

        class BrokenVault(FakeVault):
            def fetch_secrets(self):
                raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            LayeredSourceBuilder(
                options("Production", {"KeyVault__Url": "https://v.vault.azure.net"}), BrokenVault()
            ).build()

    def test_timeout_inherits_external_api_timeout(self, options):
        vault = FakeVault()
        environ = {
            "KeyVault__Url": "https://v.vault.azure.net",
            "AppSettings__ExternalApi__TimeoutSeconds": "7",
        }

        LayeredSourceBuilder(options("Production", environ), vault).build()

        assert vault.calls == [("https://v.vault.azure.net", 7.0)]

    @pytest.mark.parametrize("configured", [None, "abc", "0", "-3"])
    def test_timeout_falls_back_to_default(self, options, configured):
        vault = FakeVault()
        environ = {"KeyVault__Url": "https://v.vault.azure.net"}
        if configured is not None:
            environ["AppSettings__ExternalApi__TimeoutSeconds"] = configured

        LayeredSourceBuilder(options("Production", environ), vault).build()

        assert vault.calls[0][1] == 30.0

    @pytest.mark.parametrize("budget,expected", [(2.5, 2.5), (-1.0, 0.0), (None, 7.0)])
    def test_timeout_capped_by_time_budget(self, options, budget, expected):
        vault = FakeVault()
        environ = {
            "KeyVault__Url": "https://v.vault.azure.net",
            "AppSettings__ExternalApi__TimeoutSeconds": "7",
        }

        LayeredSourceBuilder(options("Production", environ), vault).build(time_budget=budget)

        assert vault.calls == [("https://v.vault.azure.net", expected)]
