"""Configuration for the NFT sale price pipeline."""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings


DEFAULT_BAND_EDGES = [0, 10, 100, 1000, 10000, 100000, 1000000]


class PipelineConfig(BaseSettings):
    """Configuration for the sale price normalization pipeline."""

    # Provider API Settings
    opensea_api_key: Optional[str] = Field(default=None, description="OpenSea API key")
    opensea_base_url: str = Field(default="https://api.opensea.io/api/v1", description="OpenSea API base URL")
    opensea_event_limit: int = Field(default=300, description="Max sale events per OpenSea call (provider maximum)")
    etherscan_api_key: Optional[str] = Field(default=None, description="Etherscan API key")
    etherscan_base_url: str = Field(default="https://api.etherscan.io/api", description="Etherscan API base URL")
    etherscan_tx_limit: int = Field(default=10000, description="Max transactions per Etherscan call (provider maximum)")

    # Request Settings
    request_timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(default=3, description="Maximum retry attempts for failed requests")
    rate_limit_delay: float = Field(default=0.25, description="Delay between requests in seconds")

    # Normalization Settings
    currency_decimals: int = Field(default=18, description="Decimals of the payment currency (18 for Ether)")
    included_currencies: List[str] = Field(
        default=["Ether", "Wrapped Ether"],
        description="Payment currencies that pass the adapter filter"
    )
    sale_functions: List[str] = Field(
        default=[],
        description="Contract method names counted as sales (empty: any paid call)"
    )
    band_edges: List[float] = Field(
        default=DEFAULT_BAND_EDGES,
        description="Ascending USD band boundaries"
    )

    # Logging Settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log format (json|text)")
    log_file: Optional[str] = Field(default=None, description="Log file path")
    log_max_size_mb: int = Field(default=10, description="Max log file size in MB")
    log_backup_count: int = Field(default=3, description="Number of log backups")

    # Reporting Settings
    chart_dir: Optional[str] = Field(default=None, description="Directory for rendered charts")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        env_prefix = "NFT_"
        extra = "ignore"

