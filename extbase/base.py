"""Base class for host extensions.

A concrete extension declares its identity and inherits the lifecycle
plumbing::

    class DemoExtension(ExtensionBase):
        identity_config = IdentityConfig(
            display_name="Demo Ext",
            author="Jane Doe",
            short_description="Shows how to build on ExtensionBase.",
            source_url="https://example.org/demo-ext",
        )

    DemoExtension(host, plugin_file=__file__)

Construction runs the identity contract, derives the slug, builds the
activation announcement and binds every handler to the host dispatcher.
Notices written before the host renders its notice area are buffered and
flushed by :meth:`ExtensionBase.render_admin_notices`.
"""

from __future__ import annotations

import html
import inspect
from pathlib import Path
from typing import ClassVar

from hostkit.context import HostServices, Request, SessionContext
from hostkit.events import HostEvent
from hostkit.logger import get_logger

from .flags import PersistentFlagStore
from .identity import ExtensionIdentity, IdentityConfig, IdentityContract
from .lifecycle import LifecycleBinding, LifecycleOrchestrator, LifecycleState
from .notices import MessageBus, OutputBuffer

TEXT_DOMAIN = "default"


class ExtensionBase:
    """Base class every extension derives from.

    Subclasses override :attr:`identity_config` and, where needed, the
    extension points :meth:`load_functionality`, :meth:`extra_bindings`,
    :meth:`remove_hooks` and :meth:`enqueue_scripts`.
    """

    identity_config: ClassVar[IdentityConfig] = IdentityConfig()

    def __init__(
        self,
        host: HostServices,
        *,
        plugin_file: str | None = None,
        session: SessionContext | None = None,
        identity: IdentityConfig | None = None,
    ) -> None:
        self.host = host
        self.settings = host.settings
        self.plugin_file = plugin_file or inspect.getfile(type(self))
        self.session = session if session is not None else SessionContext()

        self.buffer = OutputBuffer(host.response)
        self.flags = PersistentFlagStore(host.options, host.cache)
        self.lifecycle = LifecycleOrchestrator(host.dispatcher, owner=type(self).__name__)

        self.locale = self.set_locale()
        self.form_token = self.session.ensure_form_token()

        result = IdentityContract(self.translate).verify(
            identity or type(self).identity_config,
            is_base_class=type(self) is ExtensionBase,
            owner=type(self).__name__,
        )
        self.identity: ExtensionIdentity = result.identity
        self.warnings: list[str] = result.warnings
        self.log = get_logger(__name__, extension=self.slug)
        self.messages = MessageBus(
            self.buffer, self.flags, self.settings.notices.dedup_ttl_seconds, log=self.log
        )
        for warning in self.warnings:
            self.messages.error(warning)
        self.lifecycle.mark_verified()

        self.activation_message = self.build_activation_message()

        self.load_functionality()
        self.lifecycle.bind(self.build_bindings())

    # -- identity helpers -------------------------------------------------

    @property
    def slug(self) -> str:
        return self.identity.slug

    @property
    def state(self) -> LifecycleState:
        return self.lifecycle.state

    @property
    def bindings(self) -> tuple[LifecycleBinding, ...]:
        return self.lifecycle.bindings

    @property
    def basename(self) -> str:
        return self.host.admin.plugin_basename(self.plugin_file)

    @property
    def languages_dir(self) -> str:
        return str(Path(self.plugin_file).resolve().parent / "languages")

    def translate(self, text: str) -> str:
        return self.host.translator.translate(text)

    def admin_page_url(self, page_slug: str) -> str:
        return self.host.admin.admin_url(f"admin.php?page={page_slug}")

    # -- construction -----------------------------------------------------

    def set_locale(self) -> str:
        """Resolve the locale through the ``plugin_locale`` filter and load its default catalog."""
        translator = self.host.translator
        locale = str(
            self.host.dispatcher.filter(HostEvent.PLUGIN_LOCALE, translator.locale(), TEXT_DOMAIN)
        )
        translator.load_textdomain(TEXT_DOMAIN, self.languages_dir, locale=locale)
        return locale

    def build_activation_message(self) -> str:
        _ = self.translate
        name = html.escape(self.identity.display_name)
        settings_url = html.escape(self.admin_page_url(self.identity.admin_page_slug))
        dismiss_label = html.escape(_("Don't show this message again"))
        return (
            '<div class="notice notice-success is-dismissible custom-activation-message">'
            f"<p><strong>{_('Thank you for installing')} {name}!</strong></p>"
            f"<p>{_('To configure the extension settings, please visit the')} "
            f'<a href="{settings_url}">{name} {_("Settings")}</a> {_("page")}.</p>'
            f"<p>{_(self.identity.short_description)}</p>"
            '<form method="post" action="">'
            f'<button type="submit" name="{self.identity.hide_activation_key}" '
            f'value="1" class="button">{dismiss_label}</button>'
            "</form></div>"
        )

    def build_bindings(self) -> list[LifecycleBinding]:
        """Return the binding table, base bindings first."""
        basename = self.basename
        bindings = [
            LifecycleBinding(HostEvent.ACTIVATION.scoped(basename), self.on_activation),
            LifecycleBinding(HostEvent.DEACTIVATION.scoped(basename), self.on_deactivation),
            LifecycleBinding(HostEvent.INIT.value, self.load_translations),
            LifecycleBinding(HostEvent.ADMIN_NOTICES.value, self.render_admin_notices),
            LifecycleBinding(HostEvent.ADMIN_ENQUEUE_SCRIPTS.value, self.admin_enqueue_scripts),
            LifecycleBinding(HostEvent.ADMIN_INIT.value, self.hide_activation_message),
            LifecycleBinding(HostEvent.ENQUEUE_SCRIPTS.value, self.enqueue_scripts),
            LifecycleBinding(HostEvent.ADMIN_MENU.value, self.add_admin_menu),
            LifecycleBinding(HostEvent.PLUGIN_ACTION_LINKS.scoped(basename), self.add_source_link),
            LifecycleBinding(HostEvent.MAIL_CONTENT_TYPE.value, self.set_email_content_type),
        ]
        bindings.extend(self.extra_bindings())
        return bindings

    # -- extension points -------------------------------------------------

    def load_functionality(self) -> None:
        """Set up extension-specific state. Runs before hooks are bound."""

    def extra_bindings(self) -> list[LifecycleBinding]:
        """Return additional bindings registered after the base ones."""
        return []

    def remove_hooks(self) -> None:
        """Undo extension-specific side effects on deactivation."""

    def enqueue_scripts(self) -> None:
        """Queue front-end assets."""

    # -- hook handlers ----------------------------------------------------

    def on_activation(self) -> None:
        self.log.info("Activated %s", self.slug)
        self.set_activation_message()

    def on_deactivation(self) -> None:
        self.log.info("Deactivated %s", self.slug)
        self.remove_hooks()
        self.set_deactivation_message()
        self.lifecycle.deactivate()

    def set_activation_message(self) -> None:
        _ = self.translate
        source_url = html.escape(self.identity.source_url)
        self.messages.notice(
            f"{_('Thank you for installing the extension!')} {_('Visit')} "
            f'<a href="{source_url}" target="_blank">{_("the source repository")}</a> '
            f"{_('for more information and updates.')}"
        )

    def set_deactivation_message(self) -> None:
        self.messages.notice(self.translate("Plugin deactivated."))

    def load_translations(self) -> None:
        self.host.translator.load_textdomain(self.slug, self.languages_dir, locale=self.locale)

    def render_admin_notices(self) -> None:
        """Show the activation announcement after buffered notices, then flush."""
        try:
            self.display_activation_message()
        finally:
            self.buffer.flush()

    def display_activation_message(self) -> None:
        if not self.flags.is_set(self.identity.hide_activation_key):
            self.messages.write(self.activation_message)

    def hide_activation_message(self, request: Request | None = None) -> None:
        key = self.identity.hide_activation_key
        if request is not None and request.field_equals(key, "1"):
            self.flags.set_permanent(key)

    def admin_enqueue_scripts(self) -> None:
        stylesheet = self.host.admin.plugin_dir_url(self.plugin_file) + self.settings.admin.stylesheet
        self.host.admin.enqueue_style("activation-message", stylesheet)

    def add_admin_menu(self) -> None:
        admin = self.host.admin
        capability = self.settings.admin.capability
        docs_title = self.translate(self.settings.admin.documentation_title)
        admin.add_menu_page(
            self.identity.display_name,
            self.identity.display_name,
            capability,
            self.identity.admin_page_slug,
            self.admin_page_content,
        )
        admin.add_submenu_page(
            self.identity.admin_page_slug,
            docs_title,
            docs_title,
            capability,
            self.identity.documentation_page_slug,
            self.documentation_page_content,
        )

    def add_source_link(self, links: list[str]) -> list[str]:
        source_url = html.escape(self.identity.source_url)
        return [*links, f'<a href="{source_url}" target="_blank">{self.translate("Source")}</a>']

    def set_email_content_type(self, *_args: object) -> str:
        return self.settings.mail.content_type

    # -- admin pages ------------------------------------------------------

    def admin_page_content(self) -> None:
        _ = self.translate
        docs_url = html.escape(self.admin_page_url(self.identity.documentation_page_slug))
        self.host.response.write(
            f"<h1>{html.escape(self.identity.display_name)}</h1>"
            f"<p>{_(self.identity.short_description)}</p>"
            f"<p>{_('Nothing to configure here, see the')} "
            f'<a href="{docs_url}">{_("documentation page")}</a>.</p>'
        )

    def documentation_page_content(self) -> None:
        _ = self.translate
        self.host.response.write(
            '<div class="wrap">'
            f"<h2>{html.escape(self.identity.display_name)} {_('Documentation')}</h2>"
            f"<p>{_('Subclass ExtensionBase, declare identity_config and construct it with the host services.')}</p>"
            "</div>"
        )
