#!/usr/bin/env python3
"""
NFT Gallery CLI entrypoint
"""

import asyncio
import json
from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from nft_gallery import EvmNftReader, NftGallery
from nft_gallery.config import BLOCKCHAINS, config
from nft_gallery.exceptions import GalleryError
from nft_gallery.logging_setup import configure_logging
from nft_gallery.storage import get_storage_adapter

app = typer.Typer(help="NFT Gallery - Paged ERC-721 ownership and metadata reader")
console = Console()


def _shorten(value: Optional[str], length: int = 20) -> str:
    if not value:
        return "Unknown"
    return value[:length] + "..." if len(value) > length else value


@app.command()
def gallery(
    contract: str = typer.Argument(..., help="ERC-721 contract address"),
    owner: Optional[str] = typer.Option(None, "--owner", help="Contract owner wallet (for templated metadata URLs)"),
    holder: Optional[str] = typer.Option(None, "--holder", help="Only list tokens held by this wallet"),
    chain: str = typer.Option(config.chain, help="Blockchain (avalanche, ethereum, fantom, polygon)"),
    rpc_url: Optional[str] = typer.Option(config.rpc_url, "--rpc-url", help="JSON-RPC endpoint"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number"),
    page_size: int = typer.Option(config.items_per_page, "--page-size", "-n", min=1, help="Items per page"),
    ascending: bool = typer.Option(config.is_ascending, "--ascending/--descending", help="Sort by token ID"),
    fast_metadata: bool = typer.Option(
        config.use_templated_metadata,
        "--fast-metadata/--on-chain-metadata",
        help="Derive metadata URLs from the profiles layout, or read them from tokenURI",
    ),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output file (JSON)"),
):
    """Show one page of NFTs on a contract"""
    configure_logging(config.log_level, config.log_file)
    settings = replace(
        config,
        contract_address=contract,
        contract_owner_address=owner or config.contract_owner_address,
        holder_address=holder,
        chain=chain,
        rpc_url=rpc_url,
        items_per_page=page_size,
        is_ascending=ascending,
        use_templated_metadata=fast_metadata,
    )

    async def fetch_page():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Fetching page {page} of {contract}...", total=None)
            reader = EvmNftReader.from_config(
                settings,
                on_loading_message=lambda message: progress.update(task, description=message),
            )
            async with reader:
                nft_gallery = NftGallery(
                    reader,
                    get_storage_adapter(settings),
                    settings.collection_name,
                    is_ascending=settings.is_ascending,
                )
                nft_gallery.page = page
                nfts = await nft_gallery.activate()
            progress.update(task, completed=True)

        console.print(
            f"\n[bold green]Page {nft_gallery.page} of {nft_gallery.number_of_pages} "
            f"({nft_gallery.item_count} NFTs)[/bold green]"
        )

        if nfts:
            table = Table(title=f"Contract: {contract}")
            table.add_column("Token ID", style="yellow")
            table.add_column("Name", style="white")
            table.add_column("Owner", style="cyan")
            table.add_column("Metadata", style="magenta")

            for nft in nfts:
                table.add_row(
                    str(nft.token_id),
                    nft.name or "Unnamed",
                    _shorten(nft.owner),
                    "ok" if nft.metadata is not None else "[red]missing[/red]",
                )

            console.print(table)

        if output:
            with open(output, "w") as f:
                json.dump([nft.model_dump() for nft in nfts], f, indent=2, default=str)
            console.print(f"\n[green]Saved to {output}[/green]")

    try:
        asyncio.run(fetch_page())
    except GalleryError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)


@app.command()
def owner(
    contract: str = typer.Argument(..., help="ERC-721 contract address"),
    token_id: int = typer.Argument(..., min=0, help="Token ID"),
    chain: str = typer.Option(config.chain, help="Blockchain"),
    rpc_url: Optional[str] = typer.Option(config.rpc_url, "--rpc-url", help="JSON-RPC endpoint"),
):
    """Show the wallet holding a token"""
    configure_logging(config.log_level, config.log_file)
    settings = replace(
        config,
        contract_address=contract,
        chain=chain,
        rpc_url=rpc_url,
        use_templated_metadata=False,
    )

    async def fetch_owner():
        async with EvmNftReader.from_config(settings) as reader:
            return await reader.get_token_owner(token_id)

    try:
        wallet = asyncio.run(fetch_owner())
    except GalleryError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(code=1)

    explorer_url = settings.get_chain_config().token_url(contract, token_id)
    console.print(f"Token [yellow]{token_id}[/yellow] is held by [cyan]{wallet}[/cyan]")
    console.print(f"[dim]{explorer_url}[/dim]")


@app.command()
def chains():
    """List supported chains"""
    table = Table(title="Supported chains")
    table.add_column("Chain", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Chain ID", style="yellow")
    table.add_column("Currency", style="white")
    table.add_column("Public RPC", style="magenta")

    for chain_enum, chain_config in BLOCKCHAINS.items():
        table.add_row(
            chain_enum.value,
            chain_config.name,
            str(chain_config.chain_id),
            f"{chain_config.native_currency.name} ({chain_config.native_currency.symbol})",
            chain_config.public_rpc,
        )

    console.print(table)


if __name__ == "__main__":
    app()
