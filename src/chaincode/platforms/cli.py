"""The `ccplatform` command-line interface."""

import importlib.metadata
import io
from pathlib import Path

import click

from .config import load_config
from .exceptions import PlatformError, ValidationError
from .java import default_registry
from .models import JAVA_PLATFORM_NAME
from .packaging.reader import ArchiveReader
from .packaging.writer import open_package_writer, write_bytes_to_package

try:
    __version__ = importlib.metadata.version("chaincode-platforms")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0-dev"

manifest_option = click.option(
    "--manifest",
    "manifest_path",
    default="pyproject.toml",
    type=click.Path(dir_okay=False, resolve_path=True),
    help="TOML manifest holding a [tool.chaincode.java] table.",
)
platform_option = click.option(
    "--platform",
    "platform_name",
    default=JAVA_PLATFORM_NAME,
    show_default=True,
    help="Chaincode platform to use.",
)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(
    __version__,
    "-V",
    "--version",
    prog_name="ccplatform",
    message="%(prog)s version %(version)s",
)
def cli() -> None:
    """Chaincode package validation and build tool."""
    pass


@cli.command("package")
@click.argument(
    "source_dir", type=click.Path(exists=True, file_okay=False, resolve_path=True)
)
@click.option(
    "--out",
    required=True,
    type=click.Path(dir_okay=False, resolve_path=True),
    help="Where to write the gzip tar code package.",
)
@platform_option
def package_command(source_dir: str, out: str, platform_name: str) -> None:
    """Packages a chaincode source tree and checks the result."""
    click.echo(f"📦 Packaging '{source_dir}'...")
    try:
        platform = default_registry().get(platform_name)
        code = platform.get_deployment_payload(source_dir)
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(code)
    except (PlatformError, OSError) as e:
        click.secho(f"❌ Packaging Failed:\n{e}", fg="red", err=True)
        raise click.Abort() from e
    click.secho(f"✅ Package written: {out_path} ({len(code)} bytes)", fg="green")

    try:
        platform.validate_code_package(code)
    except ValidationError as e:
        click.secho(
            f"⚠️  Package would be rejected at install time: {e}", fg="yellow"
        )


@cli.command("validate")
@click.argument(
    "package_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True)
)
@platform_option
def validate_command(package_file: str, platform_name: str) -> None:
    """Validates a code package against the platform's path and mode policy."""
    click.echo(f"🔍 Validating package '{package_file}'...")
    try:
        platform = default_registry().get(platform_name)
        platform.validate_code_package(Path(package_file).read_bytes())
    except PlatformError as e:
        click.secho(f"❌ Validation failed: {e}", fg="red", err=True)
        raise click.Abort() from e
    click.secho("✅ Package is valid.", fg="green")


@cli.command("inspect")
@click.argument(
    "package_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True)
)
def inspect_command(package_file: str) -> None:
    """Lists the entries of a code package."""
    try:
        click.echo(ArchiveReader(Path(package_file).read_bytes()).get_info())
    except PlatformError as e:
        click.secho(f"❌ Cannot read package: {e}", fg="red", err=True)
        raise click.Abort() from e


@cli.command("dockerfile")
@manifest_option
@platform_option
def dockerfile_command(manifest_path: str, platform_name: str) -> None:
    """Prints the runtime image instructions for built chaincode."""
    try:
        config = load_config(Path(manifest_path))
        platform = default_registry(config).get(platform_name)
        rendered = platform.generate_dockerfile().render()
    except PlatformError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        raise click.Abort() from e
    click.echo(rendered)


@cli.command("build")
@click.argument(
    "package_file", type=click.Path(exists=True, dir_okay=False, resolve_path=True)
)
@click.option(
    "--out",
    required=True,
    type=click.Path(dir_okay=False, resolve_path=True),
    help="Where to write the image build context (gzip tar).",
)
@manifest_option
@platform_option
def build_command(
    package_file: str, out: str, manifest_path: str, platform_name: str
) -> None:
    """Builds a code package into an image build context."""
    click.echo(f"🚀 Building '{package_file}'...")
    try:
        config = load_config(Path(manifest_path))
        platform = default_registry(config).get(platform_name)
        code = Path(package_file).read_bytes()

        buf = io.BytesIO()
        with open_package_writer(buf) as tar:
            dockerfile = platform.generate_dockerfile().render()
            write_bytes_to_package("Dockerfile", dockerfile.encode(), tar)
            platform.generate_docker_build(code, tar)

        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_bytes(buf.getvalue())
    except (PlatformError, OSError) as e:
        click.secho(f"❌ Build Failed:\n{e}", fg="red", err=True)
        raise click.Abort() from e
    click.secho(f"✅ Build context written: {out_path}", fg="green")


main = cli
