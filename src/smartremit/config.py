"""Application configuration using pydantic-settings.

Holds the account-to-contract mapping, the admin signing credential and the
RPC/quote endpoints. Read once at startup; nothing re-reads the environment
afterwards.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

NETWORK_PASSPHRASES = {
    "MAINNET": "Public Global Stellar Network ; September 2015",
    "TESTNET": "Test SDF Network ; September 2015",
    "FUTURENET": "Test SDF Future Network ; October 2022",
    "LOCALNET": "Standalone Network ; February 2017",
}

DEFAULT_EXPLORER_URLS = {
    "TESTNET": "https://stellar.expert/explorer/testnet/tx/",
    "MAINNET": "https://stellar.expert/explorer/public/tx/",
    "FUTURENET": "https://stellar.expert/explorer/futurenet/tx/",
    "LOCALNET": "http://localhost:8000/tx/",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # API
    # ======================
    api_host: str = Field(default="0.0.0.0", description="API server host")
    api_port: int = Field(default=4000, description="API server port")

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug mode")
    cors_origins: str = Field(
        default="*", description="Comma-separated allowed CORS origins (* for any)"
    )

    # ======================
    # Stellar network
    # ======================
    network: str = Field(
        default="TESTNET", description="TESTNET, MAINNET, FUTURENET or LOCALNET"
    )
    soroban_rpc_url: str = Field(
        default="https://soroban-testnet.stellar.org", description="Soroban RPC URL"
    )
    explorer_base_url: Optional[str] = Field(
        default=None, description="Explorer prefix for transaction hashes"
    )
    rpc_timeout_seconds: float = Field(
        default=30.0, description="Per-call timeout for RPC requests"
    )

    # ======================
    # Admin
    # ======================
    admin_public_key: str = Field(default="", description="Admin account public key")
    admin_secret_key: str = Field(default="", description="Admin signing secret (S...)")
    admin_auth_token: str = Field(default="", description="Bearer token for admin endpoints")

    # ======================
    # Contracts
    # ======================
    usdc_contract_id: str = Field(default="", description="USDC token contract")
    eurc_contract_id: str = Field(default="", description="EURC token contract")
    multisig_contract_id: str = Field(default="", description="Treasury multisig contract")

    smart_account_a: str = Field(default="", description="Smart account contract for label A")
    smart_account_b: str = Field(default="", description="Smart account contract for label B")
    smart_account_c: str = Field(default="", description="Smart account contract for label C")
    smart_account_d: str = Field(default="", description="Smart account contract for label D")

    # ======================
    # Multisig treasury
    # ======================
    multisig_label: str = Field(default="Treasury Multisig", description="Display label")
    multisig_threshold: int = Field(default=3, description="Approvals required to execute")
    multisig_signers: str = Field(
        default="A,B,C,D", description="Comma-separated signer account labels"
    )

    # ======================
    # Forex
    # ======================
    forex_usdc_account_label: str = Field(default="A", description="Account holding USDC leg")
    forex_eurc_account_label: str = Field(default="B", description="Account holding EURC leg")
    soroswap_api_url: str = Field(
        default="https://api.soroswap.finance", description="Soroswap API base URL"
    )
    soroswap_api_key: str = Field(default="", description="Soroswap API key")
    soroswap_quote_network: str = Field(
        default="testnet", description="Network queried for quotes"
    )
    soroswap_protocols: str = Field(
        default="soroswap,phoenix,aqua", description="Comma-separated routing protocols"
    )

    # ======================
    # Transactions
    # ======================
    tx_base_fee: int = Field(default=60000, description="Base fee in stroops")
    tx_timeout_seconds: int = Field(default=120, description="Transaction validity window")

    @property
    def network_passphrase(self) -> str:
        """Get the passphrase for the configured network (TESTNET if unknown)."""
        return NETWORK_PASSPHRASES.get(self.network.upper(), NETWORK_PASSPHRASES["TESTNET"])

    @property
    def explorer_url(self) -> str:
        """Get explorer prefix, falling back to the network default."""
        if self.explorer_base_url:
            return self.explorer_base_url
        return DEFAULT_EXPLORER_URLS.get(self.network.upper(), DEFAULT_EXPLORER_URLS["TESTNET"])

    @property
    def account_contracts(self) -> dict[str, str]:
        """Map account labels to their smart account contract IDs."""
        return {
            "A": self.smart_account_a,
            "B": self.smart_account_b,
            "C": self.smart_account_c,
            "D": self.smart_account_d,
        }

    @property
    def signer_labels(self) -> list[str]:
        """Parse multisig signer labels into a list."""
        return [s.strip().upper() for s in self.multisig_signers.split(",") if s.strip()]

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse allowed CORS origins into a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def protocols(self) -> list[str]:
        """Parse Soroswap protocols into a list."""
        return [p.strip() for p in self.soroswap_protocols.split(",") if p.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "cors_origins": self.cors_origin_list,
            "network": self.network,
            "rpc_url": self.soroban_rpc_url,
            "explorer": self.explorer_url,
            "admin_public_key": self.admin_public_key or "(not set)",
            "admin_secret_key": "***" if self.admin_secret_key else "(not set)",
            "admin_auth_token": "***" if self.admin_auth_token else "(not set)",
            "contracts": {
                "usdc": self.usdc_contract_id or "(not set)",
                "eurc": self.eurc_contract_id or "(not set)",
                "multisig": self.multisig_contract_id or "(not set)",
            },
            "accounts": {
                label: contract or "(not set)"
                for label, contract in self.account_contracts.items()
            },
            "forex": {
                "usdc_account": self.forex_usdc_account_label,
                "eurc_account": self.forex_eurc_account_label,
                "soroswap": self.soroswap_api_url,
                "soroswap_api_key": "***" if self.soroswap_api_key else "(not set)",
                "quote_network": self.soroswap_quote_network,
            },
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
