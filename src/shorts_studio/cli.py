"""
CLI Entry Point — command-line interface for Shorts Studio.

Provides a user-friendly CLI with Rich console output.

Usage:
    shorts-studio generate --topic "cats"          # Full run, AI voice
    shorts-studio generate --script-file my.txt    # Use your own script
    shorts-studio generate --surprise-me           # Random sample topic
    shorts-studio catalogs                         # List selectable options
    shorts-studio setup                            # Validate configuration
    shorts-studio serve                            # Start FastAPI server
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

from shorts_studio.domain.catalogs import (
    DURATION_OPTIONS,
    VISUAL_STYLE_OPTIONS,
    VOICE_OPTIONS,
    OptionItem,
    default_visual_style,
    random_topic,
)
from shorts_studio.domain.value_objects import AccountTier, AspectRatio

console = Console()


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv).

    Returns:
        Exit code (0 = success, 1 = failure, 2 = upgrade required).
    """
    parser = argparse.ArgumentParser(
        prog="shorts-studio",
        description="🎬 Shorts Studio — script, voiceover, thumbnail, and video from one idea",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  shorts-studio generate --topic "Why cats purr"
  shorts-studio generate --script-file script.txt --audio-file voice.mp3
  shorts-studio catalogs
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate command
    gen = subparsers.add_parser("generate", help="Run the generation pipeline")
    content = gen.add_mutually_exclusive_group()
    content.add_argument("--topic", default="", help="Topic to write a script about")
    content.add_argument("--script-file", default="", help="Use this script verbatim")
    content.add_argument(
        "--surprise-me", action="store_true", help="Pick a random sample topic"
    )
    gen.add_argument("--duration", default=DURATION_OPTIONS[0].value, help="Target duration")
    gen.add_argument(
        "--style",
        default=default_visual_style(),
        help="Visual style (catalog value or the first word of its label)",
    )
    gen.add_argument(
        "--aspect",
        choices=[a.value for a in AspectRatio],
        default=AspectRatio.SHORTS.value,
        help="Video aspect ratio",
    )
    gen.add_argument("--captions", action="store_true", help="Generate captions")
    gen.add_argument("--thumbnail", action="store_true", help="Generate a thumbnail")
    gen.add_argument("--voice", default=VOICE_OPTIONS[0].value, help="AI voice name")
    gen.add_argument("--custom-voice-name", default="", help="Name for the custom voice option")
    audio = gen.add_mutually_exclusive_group()
    audio.add_argument("--audio-file", default="", help="Use an uploaded voiceover")
    audio.add_argument("--record-file", default="", help="Use a recorded voiceover clip")
    gen.add_argument(
        "--tier",
        choices=[t.value for t in AccountTier],
        default=None,
        help="Account tier (defaults to ACCOUNT_TIER)",
    )
    gen.add_argument(
        "--env-file",
        default=".env",
        help="Path to environment file (default: .env)",
    )

    # Catalogs command
    subparsers.add_parser("catalogs", help="List durations, voices, and visual styles")

    # Setup command
    setup_parser = subparsers.add_parser("setup", help="Validate configuration")
    setup_parser.add_argument("--env-file", default=".env", help="Path to environment file")

    # Serve command (FastAPI)
    serve_parser = subparsers.add_parser("serve", help="Start the FastAPI REST API")
    serve_parser.add_argument("--port", type=int, default=8000, help="Server port (default: 8000)")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Server host (default: 127.0.0.1)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "generate":
        return _cmd_generate(args)
    elif args.command == "catalogs":
        return _cmd_catalogs()
    elif args.command == "setup":
        return _cmd_setup(env_file=args.env_file)
    elif args.command == "serve":
        return _cmd_serve(host=args.host, port=args.port)

    return 0


def resolve_option(options: tuple[OptionItem, ...], text: str) -> str:
    """Accept a catalog value, or the first word of an option's label."""
    for option in options:
        if option.value == text:
            return option.value
    wanted = text.strip().lower()
    for option in options:
        if option.label.split()[0].lower() == wanted:
            return option.value
    return text


def _read_media(path_str: str):
    from shorts_studio.domain.entities import MediaAsset

    path = Path(path_str)
    mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return MediaAsset(data=path.read_bytes(), mime_type=mime_type)


def _build_request(args: argparse.Namespace):
    from shorts_studio.domain.entities import GenerationRequest
    from shorts_studio.domain.value_objects import AudioSource, ScriptMode

    topic = args.topic
    custom_script = ""
    script_mode = ScriptMode.AUTO
    if args.script_file:
        custom_script = Path(args.script_file).read_text(encoding="utf-8")
        script_mode = ScriptMode.CUSTOM
    elif args.surprise_me:
        topic = random_topic()
        console.print(f"🎲 Topic: [bold]{topic}[/bold]")

    audio_source = AudioSource.AI
    uploaded = recorded = None
    if args.audio_file:
        audio_source = AudioSource.FILE
        uploaded = _read_media(args.audio_file)
    elif args.record_file:
        audio_source = AudioSource.RECORD
        recorded = _read_media(args.record_file)

    return GenerationRequest(
        script_mode=script_mode,
        topic=topic,
        custom_script=custom_script,
        duration=resolve_option(DURATION_OPTIONS, args.duration),
        visual_style=resolve_option(VISUAL_STYLE_OPTIONS, args.style),
        aspect_ratio=AspectRatio.from_str(args.aspect),
        include_captions=args.captions,
        include_thumbnail=args.thumbnail,
        audio_source=audio_source,
        voice=resolve_option(VOICE_OPTIONS, args.voice),
        custom_voice_name=args.custom_voice_name,
        uploaded_audio=uploaded,
        recorded_audio=recorded,
    )


def _cmd_generate(args: argparse.Namespace) -> int:
    """Run one pipeline and save its assets."""
    from shorts_studio.core.config import Settings
    from shorts_studio.core.container import Container
    from shorts_studio.core.logging import setup_logging
    from shorts_studio.domain.exceptions import UpgradeRequiredError, ValidationError

    try:
        settings = Settings(_env_file=args.env_file)
    except Exception as e:
        console.print(f"❌ Configuration error: {e}")
        return 1

    setup_logging(log_file=settings.log_file or None)

    try:
        request = _build_request(args)
    except OSError as e:
        console.print(f"❌ Could not read input file: {e}")
        return 1

    tier = AccountTier.from_str(args.tier) if args.tier else settings.account_tier
    container = Container(settings)
    pipeline = container.pipeline()

    last_message = ""
    script_shown = False

    def on_update(snapshot) -> None:
        nonlocal last_message, script_shown
        # The script arrives long before the video; show it right away
        if snapshot.script is not None and not script_shown:
            script_shown = True
            console.print(f"📝 Script ready: [bold]{snapshot.script.title}[/bold]")
        if snapshot.progress_message and snapshot.progress_message != last_message:
            last_message = snapshot.progress_message
            console.print(f"[cyan]…[/cyan] {last_message}")

    try:
        snapshot = asyncio.run(pipeline.run(request, tier, on_update=on_update))
    except UpgradeRequiredError as e:
        console.print(f"🔒 {e}")
        console.print("   Upgrade to Pro (or pass --tier pro) to use these options.")
        return 2
    except ValidationError as e:
        console.print(f"❌ {e}")
        return 1

    run_id = datetime.now().strftime("run_%Y%m%d_%H%M%S")
    summary = container.exporter().execute(snapshot, run_id)

    if summary.tags:
        console.print("\n🏷️  " + " ".join(f"#{tag}" for tag in summary.tags))
    for name, path in summary.files.items():
        console.print(f"   💾 {name}: {path}")

    if summary.success:
        console.print("\n✅ All assets generated successfully!")
        return 0

    console.print(f"\n❌ Generation failed: {summary.error}")
    return 1


def _cmd_catalogs() -> int:
    """Print the option catalogs."""
    for title, options in (
        ("⏱️  Durations", DURATION_OPTIONS),
        ("🔊 Voices", VOICE_OPTIONS),
        ("🎨 Visual Styles", VISUAL_STYLE_OPTIONS),
    ):
        table = Table(title=title)
        table.add_column("Label", style="cyan")
        table.add_column("Value")
        table.add_column("Plan", style="magenta")
        for option in options:
            table.add_row(option.label, option.value, "Pro" if option.restricted else "Free")
        console.print(table)
    return 0


def _cmd_setup(env_file: str) -> int:
    """Validate configuration and print status."""
    from shorts_studio.core.config import Settings

    try:
        settings = Settings(_env_file=env_file)
    except Exception as e:
        console.print(f"❌ Configuration error: {e}")
        return 1

    table = Table(title="🔧 Configuration Status")
    table.add_column("Setting", style="cyan")
    table.add_column("Status", style="green")

    table.add_row("API Key", "✅" if settings.api_key.strip() else "❌ Not set")
    table.add_row("Account Tier", settings.account_tier.value)
    table.add_row("Output Dir", str(settings.output_dir))
    table.add_row("Script Model", settings.gemini.script_model)
    table.add_row("Speech Model", settings.gemini.speech_model)
    table.add_row("Image Model", settings.gemini.image_model)
    table.add_row("Video Model", settings.gemini.video_model)
    table.add_row("Poll Interval", f"{settings.gemini.poll_interval_seconds:g}s")
    console.print(table)

    if not settings.api_key.strip():
        from shorts_studio.core.config import MISSING_API_KEY_HELP

        console.print(f"\n❌ {MISSING_API_KEY_HELP}")
        return 1

    console.print("\n✅ Configuration validated!")
    return 0


def _cmd_serve(host: str, port: int) -> int:
    """Start the FastAPI REST API server."""
    import uvicorn

    from shorts_studio.presentation.api import create_app

    app = create_app()
    console.print(f"🚀 Starting Shorts Studio API on http://{host}:{port}")
    console.print(f"   📖 Docs: http://{host}:{port}/docs")
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
