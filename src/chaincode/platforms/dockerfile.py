"""Generates the image instructions that place a built chaincode in its runtime image."""

from pathlib import Path

import jinja2

from .exceptions import InvalidInputError
from .models import BINPACKAGE_NAME, JAVA_CHAINCODE_PATH, ImageSpec

_TEMPLATE_DIR = Path(__file__).parent / "templates"


def _get_template_env() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(_TEMPLATE_DIR),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def generate_dockerfile(
    base_image: str,
    artifact_name: str = BINPACKAGE_NAME,
    chaincode_path: str = JAVA_CHAINCODE_PATH,
) -> ImageSpec:
    """
    Returns the two instructions for the runtime image: the base image
    selection, then the placement of the build artifact. The base image
    reference is passed through as given, even when empty, but may not span
    lines.
    """
    if "\n" in base_image or "\r" in base_image:
        raise InvalidInputError(f"base image reference spans lines: {base_image!r}")

    template = _get_template_env().get_template("Dockerfile.j2")
    rendered = template.render(
        base_image=base_image,
        artifact_name=artifact_name,
        chaincode_path=chaincode_path,
    )
    return ImageSpec(instructions=rendered.split("\n"))
