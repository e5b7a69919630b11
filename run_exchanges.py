#!/usr/bin/env python3
"""Print the first page of exchanges (sample data unless --live is given)."""

import asyncio
import sys

from rich.console import Console
from rich.table import Table

from src.coinmarket.app import CoinMarketApp
from src.coinmarket.model.exchange import Exchange
from src.coinmarket.model.view_state import ViewState
from src.coinmarket.service.exchange_list import ExchangeListState

console = Console()


class TablePrinter:
    """Observer that renders each loaded page as a table."""

    def __init__(self, state: ExchangeListState) -> None:
        self.state = state

    def on_state_changed(self, state: ViewState[list[Exchange]]) -> None:
        if state.exception is not None:
            console.print(f"[red]Error:[/red] {state.exception}")
            return
        if state.data is None:
            console.print(f"[dim]{state.debug_description}[/dim]")
            return

        table = Table(title=f"Exchanges ({len(state.data)})")
        table.add_column("#", justify="right")
        table.add_column("Name")
        table.add_column("Volume (24h)", justify="right")
        table.add_column("Launched")
        for index, exchange in enumerate(state.data, start=1):
            table.add_row(
                str(index),
                exchange.name,
                self.state.formatted_volume(exchange),
                self.state.formatted_date(exchange),
            )
        console.print(table)


async def main(live: bool) -> None:
    async with CoinMarketApp() as app:
        exchanges = app.exchange_list()
        exchanges.subscribe(TablePrinter(exchanges))
        task = exchanges.fetch_exchanges(use_mock=not live)
        if task is not None:
            await task
        exchanges.invalidate()


if __name__ == "__main__":
    asyncio.run(main(live="--live" in sys.argv[1:]))
