import textwrap

from jinja2 import Environment, PackageLoader, StrictUndefined

__all__ = ['indent', 'render', 'rust_str']


def rust_str(value: str) -> str:
    """Escape a value for use inside a Rust string literal."""
    return value.replace('\\', '\\\\').replace('"', '\\"')


_environment = Environment(
    loader=PackageLoader('crabapi.codegen', 'templates'),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
    auto_reload=False,
)
_environment.filters['rust_str'] = rust_str


def render(template_name: str, **context) -> str:
    return _environment.get_template(template_name).render(**context)


def indent(text: str, level: int = 1) -> str:
    return textwrap.indent(text, '    ' * level)
