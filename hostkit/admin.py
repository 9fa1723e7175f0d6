"""In-memory administration surface: menu pages, stylesheets and URLs."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class MenuPage:
    """One registered admin page."""

    page_title: str
    menu_title: str
    capability: str
    menu_slug: str
    callback: Callable[[], None]
    parent_slug: str | None = None


class AdminRegistry:
    """Record admin pages and enqueued styles the way the host would."""

    def __init__(
        self,
        base_url: str = "http://localhost",
        plugins_url: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.plugins_url = (plugins_url or f"{self.base_url}/wp-content/plugins").rstrip("/")
        self.pages: dict[str, MenuPage] = {}
        self.styles: dict[str, str] = {}

    def add_menu_page(
        self,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], None],
    ) -> str:
        self.pages[menu_slug] = MenuPage(page_title, menu_title, capability, menu_slug, callback)
        return menu_slug

    def add_submenu_page(
        self,
        parent_slug: str,
        page_title: str,
        menu_title: str,
        capability: str,
        menu_slug: str,
        callback: Callable[[], None],
    ) -> str:
        self.pages[menu_slug] = MenuPage(
            page_title, menu_title, capability, menu_slug, callback, parent_slug
        )
        return menu_slug

    def subpages(self, parent_slug: str) -> list[MenuPage]:
        return [page for page in self.pages.values() if page.parent_slug == parent_slug]

    def render_page(self, menu_slug: str) -> None:
        """Invoke the callback of a registered page.

        Raises:
            KeyError: If no page is registered under ``menu_slug``.
        """
        self.pages[menu_slug].callback()

    def admin_url(self, path: str = "") -> str:
        return f"{self.base_url}/wp-admin/{path.lstrip('/')}"

    def enqueue_style(self, handle: str, src: str) -> None:
        self.styles[handle] = src

    def plugin_basename(self, plugin_file: str) -> str:
        path = Path(plugin_file)
        return f"{path.parent.name}/{path.name}" if path.parent.name else path.name

    def plugin_dir_url(self, plugin_file: str) -> str:
        directory = Path(plugin_file).parent.name
        if not directory:
            return f"{self.plugins_url}/"
        return f"{self.plugins_url}/{quote(directory)}/"
