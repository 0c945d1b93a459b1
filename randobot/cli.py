"""
Command line interface for crawling and querying the hiking gallery
"""

import asyncio
import json

import typer
from rich.console import Console
from rich.table import Table

from randobot.api.services import build_resolver
from randobot.api.config import settings
from randobot.crawl import ContentManager, CrawlConfig, StoreState, WebCrawler
from randobot.errors import BrowserLaunchError
from randobot.logging_setup import configure_logging

app = typer.Typer(
    name="randobot",
    help="🏔️ Hiking gallery assistant",
    rich_markup_mode="rich",
    no_args_is_help=True,
)

console = Console()


@app.command()
def crawl(
    url: str = typer.Argument(settings.ROOT_URL, help="Root URL of the site"),
    data_path: str = settings.DATA_PATH,
    max_depth: int = 5,
    max_retries: int = 3,
    follow_gallery_links: bool = False,
    log_level: str = "INFO",
):
    """Crawl the site and save a fresh snapshot"""
    configure_logging(log_level, settings.LOG_FILE)
    config = CrawlConfig(
        max_depth=max_depth,
        max_retries=max_retries,
        follow_gallery_links=follow_gallery_links,
    )
    crawler = WebCrawler(config)

    try:
        store = asyncio.run(crawler.start_crawling(url, ContentManager(data_path)))
    except BrowserLaunchError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(1)

    summary = crawler.get_report()['crawl_summary']
    table = Table(title="Crawl summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    for key, value in summary.items():
        table.add_row(key, str(value))
    console.print(table)
    console.print(f"✅ {len(store.pages)} pages saved to {data_path}", style="green")


@app.command()
def ask(question: str, data_path: str = settings.DATA_PATH, log_level: str = "WARNING"):
    """Answer one question from the saved snapshot"""
    configure_logging(log_level, settings.LOG_FILE)
    content_manager = ContentManager(data_path)
    store = asyncio.run(content_manager.load())
    if content_manager.state != StoreState.LOADED:
        console.print(f"⚠️ No usable snapshot at {data_path}, run `randobot crawl` first", style="yellow")

    answer = asyncio.run(build_resolver(store).answer(question))
    console.print(answer.text)
    if answer.sources:
        console.print("\n".join(f"🔗 {source}" for source in answer.sources), style="dim")


@app.command()
def stats(data_path: str = settings.DATA_PATH, log_level: str = "WARNING"):
    """Print the site statistics of the saved snapshot"""
    configure_logging(log_level, settings.LOG_FILE)
    content_manager = ContentManager(data_path)
    store = asyncio.run(content_manager.load())
    if content_manager.state != StoreState.LOADED:
        console.print(f"❌ No usable snapshot at {data_path}", style="red")
        raise typer.Exit(1)

    console.print_json(json.dumps(store.site_stats.to_dict(), ensure_ascii=False))


if __name__ == "__main__":
    app()
