#!/usr/bin/env python3
"""
Main CLI for svgfit
===================

Commands to resolve the fonts of an SVG, normalize it to the output canvas,
and print the environment the external renderer should run with.
"""

import logging
import sys
from pathlib import Path

import click

from svgfit.core.config import AppConfig
from svgfit.core.exceptions import SvgfitError
from svgfit.core.models import FontReport, NormalizationReport
from svgfit.document import DocumentNormalizer
from svgfit.fonts import ConsoleFontCallback, FontManager

# Setup logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_config(config_path: Path | None, fonts_dir: Path | None) -> AppConfig:
    """Load the app configuration and apply command line overrides."""
    app_config = AppConfig.from_env_and_yaml(yaml_path=config_path)
    if fonts_dir is not None:
        app_config.fonts.fonts_dir = fonts_dir
    root_logger = logging.getLogger()
    # --verbose wins over the configured level
    if root_logger.level != logging.DEBUG:
        root_logger.setLevel(app_config.log_level)
    return app_config


def print_font_summary(report: FontReport) -> None:
    print("\n=== FONT PROCESSING SUMMARY ===")
    if not report.detected:
        print("No custom fonts detected - using system defaults")
    else:
        print(f"Fonts detected: {', '.join(report.detected)}")
        if report.found_locally:
            print(f"Found locally: {', '.join(report.found_locally)}")
        if report.downloaded:
            print(f"Downloaded from Google: {', '.join(report.downloaded)}")
        if report.failed:
            print(f"Failed to obtain: {', '.join(report.failed)} (will use fallbacks)")
            for error in report.errors:
                print(f"   {error}")
    print("===============================\n")


def print_normalization_summary(report: NormalizationReport) -> None:
    for step in report.steps:
        detail = f" ({step.error})" if step.error else ""
        print(f"{step.name}: {step.status.value}{detail}")


config_option = click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration YAML file (optional)",
)
fonts_dir_option = click.option(
    "--fonts-dir",
    "-f",
    type=click.Path(file_okay=False, path_type=Path),
    help="Font directory (overrides FONTS_FONTS_DIR)",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose):
    """svgfit - font resolution and SVG normalization CLI."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command(name="fonts")
@click.argument("svg", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_option
@fonts_dir_option
@click.option("--strict", is_flag=True, help="Exit with an error if any font is unavailable")
def fonts(svg, config, fonts_dir, strict):
    """Make every font referenced by SVG available locally."""
    try:
        app_config = load_config(config, fonts_dir)
        manager = FontManager(app_config.fonts)
        report = manager.ensure_fonts_available(svg, ConsoleFontCallback())
        print_font_summary(report)
    except SvgfitError as e:
        logger.exception(f"Font resolution failed: {e}")
        sys.exit(1)

    if strict and not report.all_available:
        sys.exit(2)


@cli.command(name="normalize")
@click.argument("svg", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the normalized SVG (default: overwrite input)",
)
@click.option("--target-size", "-t", type=float, help="Output canvas size in points")
@click.option("--strict", is_flag=True, help="Fail on the first normalization error")
@config_option
@fonts_dir_option
def normalize(svg, output, target_size, strict, config, fonts_dir):
    """Normalize SVG to the fixed output canvas."""
    try:
        app_config = load_config(config, fonts_dir)
        if target_size is not None:
            app_config.normalizer.target_size = target_size
        if strict:
            app_config.normalizer.strict = True

        normalizer = DocumentNormalizer(app_config.normalizer, app_config.fonts)
        report = normalizer.normalize_file(svg, output)
        print_normalization_summary(report)
    except SvgfitError as e:
        logger.exception(f"Normalization failed: {e}")
        sys.exit(1)


@cli.command(name="prepare")
@click.argument("svg", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to write the normalized SVG (default: overwrite input)",
)
@config_option
@fonts_dir_option
def prepare(svg, output, config, fonts_dir):
    """Resolve fonts, then normalize SVG for rendering."""
    try:
        app_config = load_config(config, fonts_dir)
        manager = FontManager(app_config.fonts)
        font_report = manager.ensure_fonts_available(svg, ConsoleFontCallback())
        print_font_summary(font_report)

        normalizer = DocumentNormalizer(
            app_config.normalizer, app_config.fonts, map_writer=manager.map_writer
        )
        report = normalizer.normalize_file(svg, output)
        print_normalization_summary(report)
    except SvgfitError as e:
        logger.exception(f"Preparation failed: {e}")
        sys.exit(1)


@cli.command(name="env")
@config_option
@fonts_dir_option
def env(config, fonts_dir):
    """Print the environment variables for the external renderer."""
    try:
        app_config = load_config(config, fonts_dir)
    except SvgfitError as e:
        logger.exception(f"Could not load configuration: {e}")
        sys.exit(1)

    manager = FontManager(app_config.fonts)
    renderer_env = manager.renderer_environment({})
    for key in ("XDG_DATA_DIRS", "FONTCONFIG_PATH", "MAGICK_TYPEMAP"):
        print(f"{key}={renderer_env[key]}")


if __name__ == "__main__":
    cli()
