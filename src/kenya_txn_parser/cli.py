"""
Command-line interface for the transaction message parser.
"""

from pathlib import Path
from typing import Optional, TextIO
import json
import logging
import sys

import click
from rich.console import Console
from rich.table import Table

from .classifier import MessageClassifier
from .config import generate_default_config, load_config
from .models.transaction import ParsedTransaction
from .samples import SAMPLE_MESSAGES
from .utils.exceptions import ConfigurationError
from .utils.logging_config import get_logger, setup_logging

console = Console()
logger = get_logger("cli")


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "-c",
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file (YAML)",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, config: Optional[Path], verbose: bool):
    """Parse Kenyan M-Pesa, Airtel Money and bank transaction messages."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        parser_config = load_config(config)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, parser_config.logging.level.upper(), logging.WARNING)
    setup_logging(
        level,
        log_file=parser_config.logging.file,
        log_format=parser_config.logging.format,
    )
    if config:
        logger.debug(f"Loaded configuration from {config}")

    ctx.obj = MessageClassifier(parser_config)


@main.command()
@click.argument("message", required=False)
@click.option(
    "-f",
    "--file",
    "input_file",
    type=click.File("r"),
    help="Read the message from a file ('-' for stdin)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the parsed record as JSON")
@click.pass_obj
def parse(
    classifier: MessageClassifier,
    message: Optional[str],
    input_file: Optional[TextIO],
    as_json: bool,
):
    """
    Parse a single transaction message.

    MESSAGE: Message text (or use --file)
    """
    text = _read_message(message, input_file)
    result = classifier.classify(text)
    _emit(result, as_json)


@main.command("parse-combined")
@click.argument("message", required=False)
@click.option(
    "-f",
    "--file",
    "input_file",
    type=click.File("r"),
    help="Read messages from a file ('-' for stdin)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the parsed record as JSON")
@click.pass_obj
def parse_combined(
    classifier: MessageClassifier,
    message: Optional[str],
    input_file: Optional[TextIO],
    as_json: bool,
):
    """
    Parse a bank debit notification together with its transfer confirmation.

    Falls back to single-message parsing when the messages cannot be combined.
    """
    text = _read_message(message, input_file)
    result = classifier.correlator.parse_combined(text)
    if not result.success:
        result = classifier.classify(text, correlate=False)
    _emit(result, as_json)


@main.command()
@click.argument("name", required=False)
@click.option("--json", "as_json", is_flag=True, help="Print the parsed record as JSON")
@click.pass_obj
def samples(classifier: MessageClassifier, name: Optional[str], as_json: bool):
    """
    List sample messages, or parse the sample called NAME.
    """
    if name is None:
        table = Table(title="Sample Messages")
        table.add_column("Name", style="cyan")
        table.add_column("Message")

        for key, text in SAMPLE_MESSAGES.items():
            preview = text.replace("\n", " ")
            table.add_row(key, preview[:80] + "..." if len(preview) > 80 else preview)

        console.print(table)
        return

    if name not in SAMPLE_MESSAGES:
        console.print(f"[red]Unknown sample: {name}[/red]")
        sys.exit(1)

    _emit(classifier.classify(SAMPLE_MESSAGES[name]), as_json)


@main.command("init-config")
@click.option(
    "-o", "--output", type=click.Path(path_type=Path), default=Path("parser_config.yaml")
)
def init_config(output: Path):
    """Generate a sample configuration file."""
    generate_default_config(output)
    console.print(f"[green]Configuration file generated: {output}[/green]")


def _read_message(message: Optional[str], input_file: Optional[TextIO]) -> str:
    """Return the message from the argument or the input file."""
    if input_file is not None:
        return input_file.read()
    if message:
        return message
    raise click.UsageError("Provide a MESSAGE argument or --file")


def _emit(result: ParsedTransaction, as_json: bool) -> None:
    """Print a parse result and exit non-zero when nothing was extracted."""
    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _display_result(result)

    if not result.success:
        sys.exit(1)


def _display_result(result: ParsedTransaction) -> None:
    """Display a parsed transaction in the console."""
    if not result.success:
        console.print("[red]Could not parse message[/red]")
        if result.error:
            console.print(f"[red]Error: {result.error}[/red]")
        return

    table = Table(title="Parsed Transaction")
    table.add_column("Field", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Provider", result.provider.value)
    table.add_row("Type", result.transaction_type.value.replace("_", " "))
    if result.bank_transfer_type:
        table.add_row("Transfer", result.bank_transfer_type.value.replace("_", " "))
    table.add_row("Amount", f"KES {result.amount:,.2f}")
    if result.requires_manual_fee:
        table.add_row("Fee", "[yellow]enter manually[/yellow]")
    else:
        table.add_row("Fee", f"KES {result.transaction_cost:,.2f}")

    optional_rows = [
        ("Recipient", result.recipient),
        ("Recipient Number", result.recipient_number),
        ("Account", result.account_number),
        ("Reference", result.reference),
        ("Bank Ref", result.bank_reference),
        ("M-Pesa Ref", result.mpesa_reference),
        ("Transaction Code", result.transaction_code),
        ("Date", result.date),
        ("Time", result.time),
    ]
    for label, value in optional_rows:
        if value:
            table.add_row(label, value)

    balance = result.new_balance if result.new_balance is not None else result.balance
    if balance is not None:
        table.add_row("Balance", f"KES {balance:,.2f}")

    console.print(table)


if __name__ == "__main__":
    main()
