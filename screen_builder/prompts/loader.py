"""
Jinja2 prompt rendering.

Every name declared on `Template` must have a matching `.jinja2` file in
the templates directory; a missing file fails the import instead of the
first request that needs it. Undefined variables raise, so a typo in a
builder call never silently produces an empty prompt.
"""

from functools import lru_cache
from pathlib import Path
from typing import Iterator

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"
TEMPLATE_SUFFIX = ".jinja2"


def _declared_templates() -> Iterator[str]:
    for name, value in vars(Template).items():
        if not name.startswith("_"):
            yield value


def _check_templates_exist():
    missing = [
        name for name in _declared_templates()
        if not (TEMPLATES_DIR / f"{name}{TEMPLATE_SUFFIX}").is_file()
    ]
    if missing:
        raise FileNotFoundError(
            f"Prompt templates missing from {TEMPLATES_DIR}: {', '.join(sorted(missing))}"
        )


_check_templates_exist()


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Prompts are plain text, HTML inside them must reach the LLM unescaped.
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=False,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **context) -> str:
    """
    Render a prompt template.

    Args:
        template_name: One of the `Template` constants.
        **context: Variables referenced by the template.

    Returns:
        The rendered prompt with surrounding whitespace removed.
    """
    template = _environment().get_template(f"{template_name}{TEMPLATE_SUFFIX}")
    return template.render(**context).strip()
