from pathlib import Path
from typing import Any, Dict

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import UNISWAP_V3_FACTORY, UNISWAP_V3_POOL_INIT_CODE_HASH, WETH


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Server Settings
    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")
    log_level: str = Field(default="INFO", description="Logging level")

    # Ledger
    rpc_url: str = Field(
        default="",
        description="JSON-RPC endpoint of an Ethereum node; empty runs against the simulated ledger",
        validation_alias=AliasChoices("rpc_url", "eth_rpc_url", "RPC_URL", "ETH_RPC_URL"),
    )
    rpc_timeout_seconds: int = Field(default=30, description="JSON-RPC request timeout")
    chain_id: int = Field(default=1, description="Chain the asset and pool tables refer to")

    # Engine
    engine_address: str = Field(
        default="",
        description="Account of the deployed settlement engine; empty derives a local simulation address",
    )
    governance_address: str = Field(
        default="",
        description="Only account allowed to mutate the alias and pool route tables",
    )

    # Exchange venue (Uniswap V3 mainnet deployment)
    factory_address: str = Field(
        default=UNISWAP_V3_FACTORY,
        description="Pool factory used for deterministic pool address derivation",
    )
    pool_init_code_hash: str = Field(
        default=UNISWAP_V3_POOL_INIT_CODE_HASH,
        description="keccak256 of the pool creation code",
    )
    wrapped_native_address: str = Field(
        default=WETH,
        description="Wrapped form of the native asset spoken by the pools",
    )

    # Name resolution
    name_service: str = Field(default="static", description="Name service backend: static or ens")
    static_names: Dict[str, str] = Field(
        default_factory=dict,
        description="name -> account table used by the static name service (JSON in env)",
    )

    def model_post_init(self, __context: Any) -> None:
        super().model_post_init(__context)
        object.__setattr__(self, "name_service", self.name_service.lower().strip())

    def has_rpc(self) -> bool:
        return bool(self.rpc_url)


# Global settings instance
settings = Settings()
