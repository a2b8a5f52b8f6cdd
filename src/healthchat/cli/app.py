"""Main CLI application using Typer."""
import asyncio
import mimetypes
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..errors import GatewayError, StoreAccessError
from ..gateway import Language, encode_image
from ..history import Conversation, InMemoryConversationStore
from ..session import ConversationSession
from ..utils import configure_logging
from .providers import get_preferences, get_storage, get_store, require_gateway, require_model_gateway

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="healthchat",
    help="Health assistant chat with structured medical answers",
    no_args_is_help=True,
    add_completion=True,
)
history_app = typer.Typer(help="Browse and delete past conversations", no_args_is_help=True)
config_app = typer.Typer(help="Show and change local preferences", no_args_is_help=True)
app.add_typer(history_app, name="history")
app.add_typer(config_app, name="config")

console = Console()

RETRY_NOTICE = "[red]Failed to get response. Please try again.[/red]"


@app.callback()
def _configure(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Log level (default: HEALTHCHAT_LOG_LEVEL or WARNING)"
    )
):
    configure_logging(log_level)


def split_command(text: str) -> tuple[str, str]:
    """Split REPL input into a slash command and its argument.

    Returns:
        ("/command", "argument"), or ("", text) when text is not a command
    """
    if not text.startswith("/"):
        return "", text
    parts = text.split(maxsplit=1)
    return parts[0], parts[1] if len(parts) > 1 else ""


def _read_image(path: Path) -> str:
    mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
    return encode_image(path.read_bytes(), mime_type)


def _print_reply(name: str, content: str) -> None:
    console.print(f"[bold green]{name}:[/bold green]")
    console.print(Markdown(content))
    console.print()


def _print_conversation(conversation: Conversation, bot_name: str) -> None:
    for message in conversation.messages:
        if message.role == "user":
            console.print(f"[bold yellow]You:[/bold yellow] {message.content}\n")
        else:
            _print_reply(bot_name, message.content)


@app.command()
def chat(
    language: Language | None = typer.Option(
        None,
        "--language",
        "-l",
        help="Response language (default: saved preference)"
    ),
    focus: str | None = typer.Option(
        None,
        "--focus",
        "-f",
        help="Body part to focus on"
    ),
    resume: str | None = typer.Option(
        None,
        "--resume",
        "-r",
        help="Continue a saved conversation by id"
    )
):
    """Interactive chat with the health assistant."""
    async def _chat():
        storage = get_storage()
        store = get_store(storage)
        prefs = get_preferences(storage)
        bot_name = prefs.bot_name
        lang = language or prefs.language
        gateway = require_gateway(console)

        try:
            if resume:
                conversation = store.load(resume)
                if conversation is None:
                    console.print(f"[red]Error: no saved conversation {resume}[/red]")
                    raise typer.Exit(code=1)
                session = ConversationSession.resume(conversation, gateway, store, language=lang)
                _print_conversation(conversation, bot_name)
            else:
                session = ConversationSession(gateway, store, language=lang)
                _print_reply(bot_name, session.messages[0].content)

            if focus:
                console.print(f"[dim]Suggested: {session.select_focus(focus)}[/dim]\n")

            console.print(f"[bold cyan]{bot_name}[/bold cyan] [dim]({lang.display_name})[/dim]")
            console.print(
                "[dim]Commands: /focus <part>, /image <path>, /new. "
                "Type 'exit', 'quit', or 'q' to leave[/dim]\n"
            )

            image: str | None = None
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                text = user_input.strip()
                if text.lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break

                command, argument = split_command(text)

                if command == "/focus":
                    suggestion = session.select_focus(argument)
                    if suggestion:
                        console.print(f"[dim]Suggested: {suggestion}[/dim]\n")
                    else:
                        session.clear_focus()
                        console.print("[dim]Focus cleared[/dim]\n")
                    continue

                if command == "/image":
                    path = Path(argument).expanduser()
                    try:
                        image = _read_image(path)
                    except OSError as e:
                        console.print(f"[red]Cannot read image: {e}[/red]\n")
                        continue
                    console.print(f"[dim]Attached {path.name} to the next message[/dim]\n")
                    continue

                if command == "/new":
                    session.reset()
                    image = None
                    _print_reply(bot_name, session.messages[0].content)
                    continue

                if not text and not image:
                    continue

                try:
                    with console.status("[dim]Thinking...[/dim]"):
                        reply = await session.start_turn(user_input, image=image)
                except GatewayError:
                    console.print(RETRY_NOTICE + "\n")
                    continue

                image = None
                if reply is not None:
                    _print_reply(bot_name, reply.content)
        finally:
            await gateway.close()

    asyncio.run(_chat())


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question or symptom description"),
    focus: str | None = typer.Option(None, "--focus", "-f", help="Body part to focus on"),
    image: Path | None = typer.Option(
        None,
        "--image",
        "-i",
        exists=True,
        dir_okay=False,
        help="Image to attach"
    ),
    language: Language | None = typer.Option(None, "--language", "-l", help="Response language"),
    save: bool = typer.Option(True, "--save/--no-save", help="Save the conversation to history")
):
    """Ask a single question and print the formatted answer."""
    async def _ask():
        storage = get_storage()
        prefs = get_preferences(storage)
        store = get_store(storage) if save else InMemoryConversationStore()

        gateway = require_gateway(console)
        try:
            session = ConversationSession(gateway, store, language=language or prefs.language)
            image_data = _read_image(image) if image else None
            with console.status("[dim]Thinking...[/dim]"):
                reply = await session.start_turn(question, focus_topic=focus, image=image_data)
            if reply is None:
                console.print("[yellow]Nothing to ask[/yellow]")
                raise typer.Exit(code=1)
            _print_reply(prefs.bot_name, reply.content)
        except GatewayError as e:
            console.print(RETRY_NOTICE)
            console.print(f"[dim]{e}[/dim]")
            raise typer.Exit(code=1)
        finally:
            await gateway.close()

    asyncio.run(_ask())


@history_app.command("list")
def history_list():
    """List saved conversations, newest first."""
    conversations = get_store().list()
    if not conversations:
        console.print("[dim]No chat history yet[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Id", style="dim")
    table.add_column("Started", style="green")
    table.add_column("Messages", justify="right", width=8)
    table.add_column("Preview")

    for conversation in conversations:
        table.add_row(
            conversation.id,
            conversation.created_at.astimezone().strftime("%Y-%m-%d %H:%M"),
            str(len(conversation.messages)),
            conversation.preview,
        )
    console.print(table)


@history_app.command("show")
def history_show(conversation_id: str = typer.Argument(..., help="Conversation id")):
    """Print a saved conversation."""
    storage = get_storage()
    conversation = get_store(storage).load(conversation_id)
    if conversation is None:
        console.print(f"[red]Error: no saved conversation {conversation_id}[/red]")
        raise typer.Exit(code=1)

    console.print(Panel(conversation.preview, title=conversation.id, border_style="dim"))
    _print_conversation(conversation, get_preferences(storage).bot_name)


@history_app.command("delete")
def history_delete(conversation_id: str = typer.Argument(..., help="Conversation id")):
    """Delete a saved conversation."""
    get_store().delete(conversation_id)
    console.print(f"[green]Deleted {conversation_id}[/green]")


@config_app.command("show")
def config_show():
    """Show current preferences."""
    prefs = get_preferences()
    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=15)
    table.add_column("Value")
    table.add_row("Chatbot name", prefs.bot_name)
    table.add_row("Language", f"{prefs.language.value} ({prefs.language.display_name})")
    console.print(table)


@config_app.command("set-name")
def config_set_name(name: str = typer.Argument(..., help="Assistant display name")):
    """Change the assistant's display name."""
    try:
        get_preferences().bot_name = name
    except (ValueError, StoreAccessError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Chatbot name updated successfully![/green]")


@config_app.command("set-language")
def config_set_language(language: Language = typer.Argument(..., help="Language code")):
    """Change the default response language."""
    try:
        get_preferences().language = language
    except StoreAccessError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]Language set to {language.display_name}[/green]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port")
):
    """Serve the completion function over HTTP."""
    import uvicorn

    from ..server import create_app

    gateway = require_model_gateway(console)
    console.print(f"[dim]Serving completion function on http://{host}:{port}/health-chat[/dim]")
    uvicorn.run(create_app(gateway), host=host, port=port)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
