"""Argument templates referencing the provisioned file path.

Templates are rendered with Jinja2. The output path is exposed as ``Path``
(and ``path``), and the dot-prefixed form used by existing plugin definitions
is accepted as well, so all of these are equivalent:

    --config={{ .Path }}
    --config={{ Path }}
    --config={{path}}
"""

import re
from typing import List, Sequence

from jinja2 import Environment, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError

from secret_files.provision.errors import TemplateError

# "{{ .Path }}" -> "{{ Path }}", keeping "-" whitespace-control markers
_DOT_REFERENCE = re.compile(r"(\{\{-?\s*)\.(?=[A-Za-z_])")

_environment = Environment(
    undefined=StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
    # Only "{{ }}" is live; "{%" and "{#" are literal text in args.
    # Args cannot contain NUL, so these delimiters never match.
    block_start_string="\x00{%",
    block_end_string="%}\x00",
    comment_start_string="\x00{#",
    comment_end_string="#}\x00",
)


def normalize_template(template: str) -> str:
    """Rewrite dot-prefixed references into plain Jinja2 names."""
    return _DOT_REFERENCE.sub(r"\1", template)


def render_arg(template: str, path: str) -> str:
    """Render a single argument template against the output path.

    Args:
        template: Template string, e.g. "--config-file={{ .Path }}"
        path: Resolved output path

    Returns:
        The rendered argument

    Raises:
        TemplateError: If the template is malformed or references an unknown name
    """
    try:
        compiled = _environment.from_string(normalize_template(template))
        return compiled.render(Path=path, path=path)
    except JinjaTemplateError as e:
        raise TemplateError(f"rendering arg template {template!r}: {e}", template) from e


def render_args(templates: Sequence[str], path: str) -> List[str]:
    """Render every template in order.

    Nothing is returned unless all templates render; the first failure is raised.
    """
    return [render_arg(template, path) for template in templates]
