"""Kida environment setup and page rendering.

Creates a kida Environment from wren's AppConfig. The environment is
created once when the app freezes and shared by every page handler.
"""

from pathlib import Path
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from wren.config import AppConfig
from wren.http.response import Response


def create_environment(config: AppConfig) -> Environment:
    """Create a kida Environment from app configuration.

    Templates in ``config.template_dir`` take precedence over the
    built-in ones shipped in ``wren/templates`` (e.g. ``docs.html``).
    """
    loaders = []
    if Path(config.template_dir).is_dir():
        loaders.append(FileSystemLoader(str(config.template_dir)))
    loaders.append(PackageLoader("wren", "templates"))

    return Environment(
        loader=ChoiceLoader(loaders),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )


class PageRenderer:
    """Render a named template into an HTML response.

    Usage::

        renderer = PageRenderer(create_environment(config))
        response = renderer.render_page("docs.html", {"page": page}, title="Wren | Intro")
    """

    __slots__ = ("_env",)

    def __init__(self, env: Environment) -> None:
        self._env = env

    @property
    def env(self) -> Environment:
        return self._env

    def render_page(
        self,
        template_name: str,
        context: dict[str, Any],
        status: int = 200,
        title: str = "",
    ) -> Response:
        template = self._env.get_template(template_name)
        html = template.render({**context, "title": title})
        return Response(body=html, status=status)
