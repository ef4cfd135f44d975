"""Command-line interface for the NFT sale price pipeline."""

import sys
import json
from pathlib import Path
from typing import Optional
import click
import structlog

from nft_sales_normalization.core.api_clients import APIError, EtherscanClient, OpenSeaClient
from nft_sales_normalization.core.bucketer import validate_band_edges
from nft_sales_normalization.core.errors import EmptyInput
from nft_sales_normalization.core.pipeline import SalePricePipeline, build_context
from nft_sales_normalization.models.config import PipelineConfig
from nft_sales_normalization.reporting.charts import render_all
from nft_sales_normalization.reporting.summary import format_pipeline_result
from nft_sales_normalization.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


@click.group()
@click.option('--config-file', '-c', type=click.Path(exists=True),
              help='Path to configuration (.env) file')
@click.option('--log-level', '-l', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Logging level')
@click.pass_context
def cli(ctx, config_file: Optional[str], log_level: str):
    """NFT sale price distribution CLI."""
    ctx.ensure_object(dict)

    try:
        if config_file:
            config = PipelineConfig(_env_file=config_file)
        else:
            config = PipelineConfig()

        config.log_level = log_level

        validate_band_edges(config.band_edges)

        setup_logging(config)
        ctx.obj['config'] = config

    except Exception as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


def _client_kwargs(config: PipelineConfig) -> dict:
    return {
        'rate_limit_delay': config.rate_limit_delay,
        'max_retries': config.max_retries,
        'timeout': config.request_timeout,
    }


def _run_and_report(config: PipelineConfig, raw_records, provider: str,
                    unit_price_usd: Optional[float], chart_dir: Optional[str]):
    pipeline = SalePricePipeline(config)
    context = build_context(config, unit_price_usd=unit_price_usd)

    try:
        result = pipeline.run(raw_records, provider, context)
    except EmptyInput as e:
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(format_pipeline_result(result))

    chart_dir = chart_dir or config.chart_dir
    if chart_dir:
        paths = render_all(result.summary, result.priced_records, chart_dir, prefix=provider)
        for path in paths:
            click.echo(f"📊 Chart written: {path}")


@cli.command()
@click.argument('contract_address')
@click.option('--limit', type=int, default=None, help='Max sale events (OpenSea caps at 300)')
@click.option('--chart-dir', type=click.Path(file_okay=False), default=None,
              help='Directory for histogram/pie/waffle charts')
@click.pass_context
def opensea(ctx, contract_address: str, limit: Optional[int], chart_dir: Optional[str]):
    """Price distribution of the latest OpenSea sales of a contract."""
    config = ctx.obj['config']

    try:
        client = OpenSeaClient(api_key=config.opensea_api_key,
                               base_url=config.opensea_base_url,
                               **_client_kwargs(config))
        events = client.get_sale_events(contract_address, limit or config.opensea_event_limit)
    except APIError as e:
        click.echo(f"❌ Failed to fetch OpenSea events: {e}", err=True)
        sys.exit(1)

    _run_and_report(config, events, "opensea", None, chart_dir)


@cli.command()
@click.argument('contract_address')
@click.option('--eth-price', type=float, default=None,
              help='Ether price in USD (default: fetch the current price)')
@click.option('--limit', type=int, default=None, help='Max transactions (Etherscan caps at 10000)')
@click.option('--chart-dir', type=click.Path(file_okay=False), default=None,
              help='Directory for histogram/pie/waffle charts')
@click.pass_context
def etherscan(ctx, contract_address: str, eth_price: Optional[float],
              limit: Optional[int], chart_dir: Optional[str]):
    """Price distribution of the latest paid transactions to a contract."""
    config = ctx.obj['config']

    try:
        client = EtherscanClient(api_key=config.etherscan_api_key,
                                 base_url=config.etherscan_base_url,
                                 **_client_kwargs(config))
        transactions = client.get_transactions(contract_address, limit or config.etherscan_tx_limit)
        if eth_price is None:
            eth_price = client.get_ether_price_usd()
    except APIError as e:
        click.echo(f"❌ Failed to fetch Etherscan data: {e}", err=True)
        sys.exit(1)

    _run_and_report(config, transactions, "etherscan", eth_price, chart_dir)


@cli.command(name='from-file')
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--provider', '-p', required=True,
              type=click.Choice(['opensea', 'etherscan']),
              help='Provider the raw records came from')
@click.option('--eth-price', type=float, default=None,
              help='Ether price in USD (required for etherscan records)')
@click.option('--chart-dir', type=click.Path(file_okay=False), default=None,
              help='Directory for histogram/pie/waffle charts')
@click.pass_context
def from_file(ctx, path: str, provider: str, eth_price: Optional[float],
              chart_dir: Optional[str]):
    """Price distribution of raw records saved as JSON."""
    config = ctx.obj['config']

    if provider == 'etherscan' and eth_price is None:
        click.echo("❌ --eth-price is required for etherscan records", err=True)
        sys.exit(1)

    try:
        data = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, json.JSONDecodeError) as e:
        click.echo(f"❌ Could not read {path}: {e}", err=True)
        sys.exit(1)

    # Accept the provider response envelope or a bare list
    if isinstance(data, dict):
        data = data.get('asset_events', data.get('result', []))

    _run_and_report(config, data, provider, eth_price, chart_dir)


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
