#!/usr/bin/env python3
"""
Curator RAG Query Router - knowledge base retrieval CLI
"""

import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.panel import Panel

from curator.database.supabase_client import create_supabase_client
from curator.kb.models import KB_DESCRIPTIONS, DEFAULT_KB
from curator.models.llm_manager import LLMManager
from curator.rag.models import RagResult
from curator.rag.vector_store import SupabaseVectorStore
from curator.router.query_router import QueryRouter
from curator.settings.provider_selector import ProviderSelector, SupabaseSettingsStore

logger = logging.getLogger(__name__)


def load_env_file():
    """Load environment variables from .env file if it exists."""
    env_file = Path(".env")
    if env_file.exists():
        with open(env_file, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    os.environ[key] = value


def load_config(config_path: str = "config/config.yaml") -> dict:
    """Load configuration from YAML file."""
    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
        return config or {}
    except FileNotFoundError:
        print(f"❌ Configuration file not found: {config_path}")
        sys.exit(1)
    except yaml.YAMLError as e:
        print(f"❌ Error parsing configuration file: {e}")
        sys.exit(1)


def setup_logging(config: dict):
    """Setup logging configuration."""
    log_config = config.get("logging", {})
    log_level = getattr(logging, log_config.get("level", "INFO"))
    log_format = log_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    log_file = log_config.get("file", "logs/curator_rag.log")
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[
            logging.FileHandler(log_file),
            logging.StreamHandler()
        ]
    )


def show_taxonomy(console: Console):
    """Display the knowledge base taxonomy."""
    table = Table(title="Knowledge Bases")
    table.add_column("Id", style="cyan")
    table.add_column("Covers", style="white")

    for kb, description in KB_DESCRIPTIONS.items():
        label = f"{kb.value} (default)" if kb == DEFAULT_KB else kb.value
        table.add_row(label, description)

    console.print(table)


class CuratorQuerySystem:
    """Wires the query router to its Supabase and LLM collaborators."""

    def __init__(self, config: dict):
        self.config = config
        self.console = Console()

        rag_config = config.get("rag", {})
        supabase = create_supabase_client(config)

        self.llm_manager = LLMManager(config)
        self.provider_selector = ProviderSelector.from_config(config, SupabaseSettingsStore(supabase))
        self.vector_store = SupabaseVectorStore(
            supabase, function_name=rag_config.get("match_function", "match_documents")
        )
        self.router = QueryRouter(rag_config, self.llm_manager, self.provider_selector, self.vector_store)

    async def query(self, user_query: str, max_chunks: Optional[int] = None,
                    timeout: Optional[float] = None) -> RagResult:
        """Run a RAG query, cancelling every in-flight stage once the timeout passes."""
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=self.console,
            transient=True
        ) as progress:
            progress.add_task("Routing query...", total=None)
            return await asyncio.wait_for(
                self.router.rag_query(user_query, max_chunks=max_chunks),
                timeout=timeout
            )

    def display_result(self, user_query: str, result: RagResult):
        """Display query results in a formatted way."""
        routing_table = Table(title="Query Routing Information")
        routing_table.add_column("Property", style="cyan")
        routing_table.add_column("Value", style="white")

        routing_table.add_row("Query", escape(user_query))
        routing_table.add_row("Provider", escape(result.provider or "unknown"))
        routing_table.add_row("Knowledge Bases", escape(", ".join(result.relevant_kbs)))
        if result.failed_kbs:
            routing_table.add_row("Failed KBs", f"[red]{escape(', '.join(result.failed_kbs))}[/red]")
        routing_table.add_row("Total Results", str(result.total_results))
        routing_table.add_row("Returned", str(len(result.chunks)))

        self.console.print(routing_table)

        if not result.chunks:
            self.console.print(Panel(
                "No chunks matched the similarity threshold.",
                title="[bold yellow]No Results[/bold yellow]",
                border_style="yellow"
            ))
            return

        chunk_table = Table(title="Retrieved Chunks")
        chunk_table.add_column("#", style="dim")
        chunk_table.add_column("Similarity", style="green")
        chunk_table.add_column("KB", style="cyan")
        chunk_table.add_column("Content", style="white")

        for rank, chunk in enumerate(result.chunks, start=1):
            preview = chunk.content if len(chunk.content) <= 160 else chunk.content[:160] + "..."
            chunk_table.add_row(str(rank), f"{chunk.similarity:.3f}", escape(chunk.kb_id), escape(preview))

        self.console.print(chunk_table)

    async def interactive_mode(self):
        """Run the router in interactive mode."""
        self.console.print(Panel(
            "[bold blue]Curator Knowledge Base Search[/bold blue]\n"
            "Ask questions about rural healthcare grants, billing, compliance and more.\n"
            "Type 'quit' to exit, 'kbs' for the knowledge base list.",
            border_style="blue"
        ))

        while True:
            try:
                user_query = click.prompt("\nQuery")

                if user_query.lower() in ['quit', 'exit', 'q']:
                    break
                elif user_query.lower() == 'kbs':
                    show_taxonomy(self.console)
                    continue
                elif not user_query.strip():
                    continue

                result = await self.query(user_query)
                self.display_result(user_query, result)

            except KeyboardInterrupt:
                self.console.print("\n[yellow]Exiting...[/yellow]")
                break
            except Exception as e:
                self.console.print(f"[red]Error: {escape(str(e))}[/red]")


@click.group()
@click.option('--config', '-c', default='config/config.yaml', help='Configuration file path')
@click.option('--debug', '-d', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, config, debug):
    """Curator RAG Query Router CLI."""
    load_env_file()

    ctx.ensure_object(dict)
    ctx.obj['config'] = load_config(config)

    if debug:
        ctx.obj['config'].setdefault('logging', {})['level'] = 'DEBUG'

    setup_logging(ctx.obj['config'])


@cli.command()
@click.argument('query')
@click.option('--max-chunks', '-n', type=int, default=None, help='Maximum chunks to return')
@click.option('--timeout', '-t', type=float, default=None, help='Abort the query after this many seconds')
@click.option('--json', 'as_json', is_flag=True, help='Print the raw result as JSON')
@click.pass_context
def query(ctx, query, max_chunks, timeout, as_json):
    """Search the knowledge bases relevant to QUERY."""
    system = CuratorQuerySystem(ctx.obj['config'])

    async def run_query():
        result = await system.query(query, max_chunks=max_chunks, timeout=timeout)
        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2, default=str))
        else:
            system.display_result(query, result)

    try:
        asyncio.run(run_query())
    except asyncio.TimeoutError:
        system.console.print(f"[red]❌ Query timed out after {timeout}s[/red]")
        sys.exit(1)


@cli.command()
@click.pass_context
def provider(ctx):
    """Show the active AI provider."""
    system = CuratorQuerySystem(ctx.obj['config'])
    active = asyncio.run(system.provider_selector.get_active_provider())

    system.console.print(f"[blue]Active provider:[/blue] {active.value}")
    system.console.print(f"[blue]Initialized providers:[/blue] {', '.join(system.llm_manager.get_available_providers())}")


@cli.command()
@click.pass_context
def taxonomy(ctx):
    """List the knowledge bases queries can be routed to."""
    show_taxonomy(Console())


@cli.command()
@click.pass_context
def interactive(ctx):
    """Start interactive query mode."""
    system = CuratorQuerySystem(ctx.obj['config'])
    asyncio.run(system.interactive_mode())


if __name__ == "__main__":
    cli()
