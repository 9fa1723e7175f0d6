"""Unit tests for the extension base class."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hostkit.context import HostServices, Request, SessionContext
from hostkit.events import HostEvent

from extbase.base import ExtensionBase
from extbase.identity import IdentityConfig
from extbase.lifecycle import LifecycleBinding, LifecycleState

PLUGIN_FILE = "/srv/plugins/demo-ext/demo_ext.py"


class DemoExtension(ExtensionBase):
    identity_config = IdentityConfig(
        display_name="Demo Ext",
        author="Jane Doe",
        short_description="A demo extension.",
        source_url="https://example.org/demo-ext",
        version="2.1.0",
    )


def _build(host: HostServices, cls: type[ExtensionBase] = DemoExtension, **kwargs) -> ExtensionBase:  # type: ignore[no-untyped-def]
    return cls(host, plugin_file=PLUGIN_FILE, **kwargs)


def test_construction_derives_identity_and_registers(host: HostServices) -> None:
    extension = _build(host)

    assert extension.slug == "demo-ext"
    assert extension.identity.version == "2.1.0"
    assert extension.warnings == []
    assert extension.state is LifecycleState.REGISTERED
    assert host.response.body == ""


def test_binding_table_order(host: HostServices) -> None:
    extension = _build(host)

    assert [binding.event_name for binding in extension.bindings] == [
        "activate_demo-ext/demo_ext.py",
        "deactivate_demo-ext/demo_ext.py",
        "init",
        "admin_notices",
        "admin_enqueue_scripts",
        "admin_init",
        "wp_enqueue_scripts",
        "admin_menu",
        "plugin_action_links_demo-ext/demo_ext.py",
        "wp_mail_content_type",
    ]


def test_base_class_constructs_without_warnings(host: HostServices) -> None:
    extension = ExtensionBase(host, plugin_file=PLUGIN_FILE)

    assert extension.warnings == []
    assert extension.slug == "extensions-base"


def test_missing_fields_are_buffered_as_error_notices(host: HostServices) -> None:
    class Incomplete(ExtensionBase):
        identity_config = IdentityConfig(display_name="Half Done")

    extension = _build(host, Incomplete)

    assert len(extension.warnings) == 3
    assert host.response.body == ""
    assert extension.buffer.pending.count('class="error is-dismissible"') == 3


def test_identity_argument_overrides_class_declaration(host: HostServices) -> None:
    extension = _build(host, identity=IdentityConfig(display_name="Other Name"))

    assert extension.slug == "other-name"


def test_session_form_token(host: HostServices) -> None:
    session = SessionContext()

    extension = _build(host, session=session)

    assert extension.form_token == session.get("contact_form_token")
    assert len(extension.form_token) == 32


def test_filtered_locale_selects_catalog(host: HostServices, tmp_path: Path, write_mo) -> None:  # type: ignore[no-untyped-def]
    plugin_file = tmp_path / "demo-ext" / "demo_ext.py"
    write_mo(plugin_file.parent / "languages" / "default-fr_FR.mo", {"Settings": "Réglages"})
    seen: list[tuple[str, str]] = []

    def to_french(locale: str, domain: str) -> str:
        seen.append((locale, domain))
        return "fr_FR"

    host.dispatcher.on(HostEvent.PLUGIN_LOCALE, to_french)

    extension = DemoExtension(host, plugin_file=str(plugin_file))

    assert seen == [("en_US", "default")]
    assert extension.locale == "fr_FR"
    assert extension.translate("Settings") == "Réglages"
    assert "Demo Ext Réglages" in extension.activation_message


def test_init_loads_slug_catalog_for_filtered_locale(host: HostServices, tmp_path: Path, write_mo) -> None:  # type: ignore[no-untyped-def]
    plugin_file = tmp_path / "demo-ext" / "demo_ext.py"
    write_mo(plugin_file.parent / "languages" / "demo-ext-de_DE.mo", {"Source": "Quelle"})
    host.dispatcher.on(HostEvent.PLUGIN_LOCALE, lambda locale, domain: "de_DE")
    DemoExtension(host, plugin_file=str(plugin_file))

    host.dispatcher.trigger("init")
    links = host.dispatcher.filter(f"plugin_action_links_{host.admin.plugin_basename(str(plugin_file))}", [])

    assert links[-1].endswith(">Quelle</a>")


def test_lifecycle_logs_carry_the_slug(host: HostServices, caplog: pytest.LogCaptureFixture) -> None:
    _build(host)

    with caplog.at_level(logging.INFO, logger="extbase.base"):
        host.dispatcher.trigger("activate_demo-ext/demo_ext.py")

    record = next(r for r in caplog.records if r.getMessage() == "Activated demo-ext")
    assert record.extension == "demo-ext"


def test_first_dispatched_event_activates(host: HostServices) -> None:
    extension = _build(host)

    host.dispatcher.trigger("init")

    assert extension.state is LifecycleState.ACTIVE


def test_admin_menu_registers_pages(host: HostServices) -> None:
    _build(host)

    host.dispatcher.trigger("admin_menu")

    admin = host.admin
    assert admin.pages["demo-ext-admin"].page_title == "Demo Ext"
    assert admin.pages["demo-ext-admin"].capability == "manage_options"
    assert admin.pages["demo-ext-documentation"].parent_slug == "demo-ext-admin"


def test_admin_pages_render(host: HostServices) -> None:
    extension = _build(host)
    host.dispatcher.trigger("admin_menu")

    host.admin.render_page("demo-ext-admin")
    host.admin.render_page("demo-ext-documentation")

    body = host.response.body
    assert "<h1>Demo Ext</h1>" in body
    assert "A demo extension." in body
    assert extension.admin_page_url("demo-ext-documentation") in body
    assert "Demo Ext Documentation" in body


def test_admin_stylesheet_enqueued(host: HostServices) -> None:
    _build(host)

    host.dispatcher.trigger("admin_enqueue_scripts")

    assert host.admin.styles["activation-message"] == (
        "http://localhost/wp-content/plugins/demo-ext/css/activation-message.css"
    )


def test_source_link_and_mail_filters(host: HostServices) -> None:
    _build(host)

    links = host.dispatcher.filter("plugin_action_links_demo-ext/demo_ext.py", ["<a>Deactivate</a>"])
    content_type = host.dispatcher.filter("wp_mail_content_type", "text/plain")

    assert links == [
        "<a>Deactivate</a>",
        '<a href="https://example.org/demo-ext" target="_blank">Source</a>',
    ]
    assert content_type == "text/html"


def test_dismiss_requires_exact_form_value(host: HostServices) -> None:
    extension = _build(host)
    key = extension.identity.hide_activation_key

    host.dispatcher.trigger("admin_init", Request({key: "yes"}))
    assert extension.flags.is_set(key) is False

    host.dispatcher.trigger("admin_init", Request({key: "1"}))
    assert extension.flags.is_set(key) is True


def test_extension_points(host: HostServices) -> None:
    calls: list[str] = []

    class Custom(DemoExtension):
        def load_functionality(self) -> None:
            calls.append("load")

        def extra_bindings(self) -> list[LifecycleBinding]:
            return [LifecycleBinding("save_post", self.on_save)]

        def on_save(self, post_id: int) -> None:
            calls.append(f"save:{post_id}")

        def remove_hooks(self) -> None:
            calls.append("remove")

    extension = _build(host, Custom)
    host.dispatcher.trigger("save_post", 7)
    host.dispatcher.trigger("deactivate_demo-ext/demo_ext.py")

    assert extension.bindings[-1].event_name == "save_post"
    assert calls == ["load", "save:7", "remove"]
    assert extension.state is LifecycleState.DEACTIVATED


def test_activation_and_deactivation_notices(host: HostServices) -> None:
    extension = _build(host)

    host.dispatcher.trigger("activate_demo-ext/demo_ext.py")
    host.dispatcher.trigger("deactivate_demo-ext/demo_ext.py")

    pending = extension.buffer.pending
    assert '<a href="https://example.org/demo-ext" target="_blank">' in pending
    assert "Plugin deactivated." in pending
