"""CLI entry point for slate-docgen."""

import logging
from pathlib import Path

import click
import yaml
from jinja2 import TemplateError

from slate_docgen.config import build_configs
from slate_docgen.descriptions.loader import DescriptionLoader
from slate_docgen.errors import DocumentationError
from slate_docgen.generator.document import DocumentAssembler
from slate_docgen.generator.snippets import JinjaTemplateSource
from slate_docgen.parser.swagger import load_specification

OUTPUT_FILE = "slate.md"


@click.group()
def main():
    """slate-docgen — generate Slate API reference docs from Swagger specifications."""
    pass


@main.command()
@click.option("-i", "--input-spec", "spec", required=True, help="Location of the swagger spec, as URL or file.")
@click.option("-l", "--languages", required=True, help="Client languages separated by comma (java, python, php).")
@click.option("-o", "--output", default=".", type=click.Path(path_type=Path), help="Where to write slate.md (current dir by default).")
@click.option("-c", "--config", "config_file", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="JSON or YAML configuration file.")
@click.option("--api-package", default=None, help="Package for generated API classes.")
@click.option("--model-package", default=None, help="Package for generated model classes.")
@click.option("-D", "system_properties", default=None, help="Extra template properties as name=value,name=value.")
@click.option("--descriptions", default=None, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Folder of hand-written description overrides.")
@click.option("--templates", default=None, type=click.Path(exists=True, file_okay=False, path_type=Path), help="Folder searched for <language>_api_example.j2 before the bundled templates.")
@click.option("-v", "--verbose", is_flag=True, help="Log progress details.")
def generate(
    spec: str,
    languages: str,
    output: Path,
    config_file: Path | None,
    api_package: str | None,
    model_package: str | None,
    system_properties: str | None,
    descriptions: Path | None,
    templates: Path | None,
    verbose: bool,
):
    """Generate a Slate Markdown reference with examples in the chosen languages."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if output.is_file():
        raise click.ClickException("Output must be a directory")

    try:
        configs = build_configs(languages, config_file, api_package, model_package, system_properties)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Cannot load configuration: {e}") from e
    if not configs:
        raise click.ClickException("At least one language is required.")

    click.echo(f"Parsing {spec}...")
    try:
        specification = load_specification(spec)
    except (OSError, ValueError, yaml.YAMLError, DocumentationError) as e:
        raise click.ClickException(f"Cannot load specification: {e}") from e
    operations = sum(1 for _ in specification.iter_operations())
    click.echo(f"Found {operations} operations.")

    click.echo(f"Generating documentation ({', '.join(c.lang for c in configs)})...")
    assembler = DocumentAssembler(
        specification,
        configs,
        template_source=JinjaTemplateSource(search_path=templates),
        descriptions=DescriptionLoader(descriptions) if descriptions else None,
    )
    try:
        document = assembler.build()
    except (DocumentationError, TemplateError) as e:
        raise click.ClickException(str(e)) from e

    output.mkdir(parents=True, exist_ok=True)
    file_path = output / OUTPUT_FILE
    file_path.write_text(document.to_markdown(), encoding="utf-8")
    click.echo(f"Documentation saved to {file_path}")
