import json
import logging
import sys

import click

from .pipeline import (
    JsonSyntaxError,
    ParserConfig,
    PipelineParser,
    ReportRenderer,
    SchemaParseError,
)


@click.command()
@click.option("--name", "-n", default=None, type=str, help="Name of an untitled root schema")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--format", "-f", "output_format", default="json", type=click.Choice(["json", "text"]))
@click.option(
    "--fail-on-error",
    is_flag=True,
    default=False,
    help="Exit with status 1 when any error violation is reported",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log analyzer progress to stderr")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", required=False, default=None, type=click.Path(resolve_path=True))
def json_schema_to_ir(name, config, output_format, fail_on_error, verbose, path, output):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    with open(path) as f:
        source = f.read()

    config = ParserConfig.from_file(config) if config is not None else ParserConfig()

    # CLI name overrides the config file
    if name is not None:
        config.root_name = name

    try:
        result = PipelineParser(source, path, config).parse()
    except JsonSyntaxError as e:
        raise click.ClickException(f"{path}: {e}") from e
    except SchemaParseError as e:
        raise click.ClickException(str(e)) from e

    if output_format == "json":
        out = json.dumps(result.to_dict(), indent=2) + "\n"
    else:
        out = ReportRenderer().render(result)

    if output is None:
        click.echo(out, nl=False)
    else:
        with open(output, "w") as f:
            f.write(out)

    if fail_on_error and result.errors:
        sys.exit(1)
