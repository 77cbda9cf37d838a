"""Command-line interface using Click."""

import sys
import time
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import get_default_region, parse_region, SCAN_INTERVAL_MS
from .exceptions import TriviaBoltError
from .core.models import QuestionRecord
from .core.question_bank import QuestionBank, default_question_bank, load_question_bank
from .utils.logging import setup_logging
from .utils.validation import validate_camera_index, validate_interval_ms


def _load_bank(questions: Optional[str]) -> QuestionBank:
    if questions:
        return load_question_bank(Path(questions))
    return default_question_bank()


def _resolve_region(region: Optional[str]):
    if not region:
        return get_default_region()
    try:
        return parse_region(region)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--region")


def _announce(record: QuestionRecord) -> None:
    click.echo(f"Q: {record.question}")
    click.echo(f"A: {record.answer}")


def _fail(ctx, logger, e: Exception) -> None:
    if isinstance(e, TriviaBoltError):
        logger.error(f"❌ {e}")
    else:
        logger.error(f"❌ Unexpected error: {e}")
        if ctx.obj.get('verbose'):
            import traceback
            traceback.print_exc()
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--log-file', type=click.Path(), help='Log to file')
@click.pass_context
def cli(ctx, verbose, log_file):
    """TriviaBolt - identify trivia questions from a live camera feed."""
    ctx.ensure_object(dict)
    logger = setup_logging(
        level="DEBUG" if verbose else "INFO",
        log_file=Path(log_file) if log_file else None,
        verbose=verbose
    )
    ctx.obj['logger'] = logger
    ctx.obj['verbose'] = verbose


@cli.command()
@click.option('--camera', type=int, default=None, help='Camera device index')
@click.option('--interval-ms', type=int, default=SCAN_INTERVAL_MS,
              help='Milliseconds between scans')
@click.option('--region', type=str, default=None,
              help="Question zone as 'x,y,width,height' fractions of the frame")
@click.option('--questions', type=click.Path(exists=True, dir_okay=False),
              help='JSON file of {question, answer} objects')
@click.option('--duration', type=float, default=None,
              help='Stop after this many seconds (default: run until Ctrl-C)')
@click.pass_context
def scan(ctx, camera, interval_ms, region, questions, duration):
    """Scan the camera feed and announce matched questions."""
    from .core.scanner import QuestionScanner
    from .vision.capture import CameraCapture

    logger = ctx.obj['logger']
    roi = _resolve_region(region)

    try:
        interval_ms = validate_interval_ms(interval_ms)
        bank = _load_bank(questions)
        capture = CameraCapture(
            index=None if camera is None else validate_camera_index(camera)
        )
        with capture:
            scanner = QuestionScanner(
                capture, bank=bank, region=roi, interval=interval_ms / 1000.0
            )
            scanner.on_match(_announce)
            logger.info(f"Scanning {len(bank)} questions every {interval_ms} ms (Ctrl-C to stop)")
            deadline = time.monotonic() + duration if duration else None
            with scanner:
                try:
                    while deadline is None or time.monotonic() < deadline:
                        time.sleep(0.1)
                except KeyboardInterrupt:
                    pass
            snapshot = scanner.get_status()
            logger.info(f"Stopped. Last status: {snapshot.status.value}")
    except Exception as e:
        _fail(ctx, logger, e)


@cli.command()
@click.argument('text')
@click.option('--questions', type=click.Path(exists=True, dir_okay=False),
              help='JSON file of {question, answer} objects')
@click.option('--all', 'show_all', is_flag=True, help='List every eligible candidate')
@click.pass_context
def match(ctx, text, questions, show_all):
    """Match a piece of text against the question database."""
    from .core.matcher import MatchEngine

    logger = ctx.obj['logger']
    try:
        bank = _load_bank(questions)
        keywords = bank.normalizer.normalize(text)
        click.echo(f"Keywords: {' '.join(keywords) if keywords else '(none)'}")

        engine = MatchEngine(bank)
        if show_all:
            for candidate in engine.rank(keywords):
                click.echo(
                    f"{candidate.score:.2f} ({candidate.match_count}) "
                    f"{candidate.record.question}"
                )

        best = engine.find_best_match(keywords)
        if best is None:
            click.echo("No match")
            return
        click.echo(f"Score: {best.score:.2f}")
        _announce(best.record)
    except Exception as e:
        _fail(ctx, logger, e)


@cli.command()
@click.argument('image_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--region', type=str, default=None,
              help="Question zone as 'x,y,width,height' fractions of the image")
@click.option('--full-frame', is_flag=True, help='OCR the whole image instead of the zone')
@click.option('--questions', type=click.Path(exists=True, dir_okay=False),
              help='JSON file of {question, answer} objects')
@click.pass_context
def image(ctx, image_path, region, full_frame, questions):
    """OCR a still image and match it."""
    from .core.scanner import QuestionScanner
    from .vision.capture import StillImageCapture

    logger = ctx.obj['logger']
    roi = None if full_frame else _resolve_region(region)
    try:
        capture = StillImageCapture.from_file(Path(image_path))
        scanner = QuestionScanner(capture, bank=_load_bank(questions))
        result = scanner.scan_image(capture.get_preprocessed_frame(roi))
        if result is None:
            raise TriviaBoltError("OCR failed; see log for details")
        click.echo(f"Text: {result.raw_text.strip() or '(none)'}")
        if result.record is None:
            click.echo(f"No match ({scanner.get_status().status.value})")
            return
        _announce(result.record)
    except Exception as e:
        _fail(ctx, logger, e)


@cli.command()
@click.option('--questions', type=click.Path(exists=True, dir_okay=False),
              help='JSON file of {question, answer} objects')
@click.pass_context
def questions(ctx, questions):
    """List the question database."""
    logger = ctx.obj['logger']
    try:
        bank = _load_bank(questions)
    except Exception as e:
        _fail(ctx, logger, e)
        return
    for idx, record in enumerate(bank, 1):
        click.echo(f"{idx:3d}. {record.question} -> {record.answer}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
