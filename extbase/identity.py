"""Extension identity and the contract that fills it in.

An extension class declares an :class:`IdentityConfig`. The
:class:`IdentityContract` turns it into a frozen :class:`ExtensionIdentity`,
substituting a fallback for every missing required field. Missing fields on a
real subclass are reported as warnings, never raised.
"""

from __future__ import annotations

import hashlib
import re
import unicodedata
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from hostkit.exceptions import MissingIdentityField
from hostkit.logger import get_logger

DEFAULT_VERSION = "1.0.0"

BASE_SHORT_DESCRIPTION = (
    "Extension Base is a foundational class that streamlines building "
    "extensions: it handles translations, activation messages and admin "
    "notices, so a child class only implements its own features."
)

# Required field -> fallback used when a class leaves it empty.
REQUIRED_FIELDS: dict[str, str] = {
    "name": "extension-base",
    "display_name": "Extension's Base",
    "author": "Extension Base",
    "source_url": "https://github.com/extbase/extension-base",
    "short_description": BASE_SHORT_DESCRIPTION,
}

MISSING_FIELD_MESSAGE = "You have to override `%s` in your extension class"

_APOSTROPHES = re.compile(r"['’]")
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Return a lowercase, hyphenated, URL-safe form of ``text``.

    >>> slugify("Demo Ext")
    'demo-ext'
    >>> slugify("Extension's Base")
    'extensions-base'

    Text with nothing left after folding to ASCII maps to
    ``extension-<hash>``, so distinct names still get distinct slugs.
    """
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    folded = _APOSTROPHES.sub("", folded.lower())
    slug = _NON_ALNUM.sub("-", folded).strip("-")
    if slug or not text.strip():
        return slug
    digest = hashlib.sha256(text.strip().encode("utf-8")).hexdigest()
    return f"extension-{digest[:12]}"


def hide_activation_key(slug: str) -> str:
    """Form field and option key that dismiss the activation announcement."""
    return f"{slug}_hide_activation_message"


def is_empty(value: object) -> bool:
    """Unset, ``None`` and ``""`` are empty; ``"0"`` is not."""
    return value is None or value == ""


class IdentityConfig(BaseModel):
    """Identity an extension class declares. Every field may be omitted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str | None = None
    display_name: str | None = None
    author: str | None = None
    short_description: str | None = None
    source_url: str | None = None
    version: str | None = None


class ExtensionIdentity(BaseModel):
    """Complete, immutable identity of a constructed extension."""

    model_config = ConfigDict(frozen=True)

    name: str
    display_name: str
    slug: str
    author: str
    short_description: str
    source_url: str
    version: str = DEFAULT_VERSION

    @property
    def admin_page_slug(self) -> str:
        return f"{self.slug}-admin"

    @property
    def documentation_page_slug(self) -> str:
        return f"{self.slug}-documentation"

    @property
    def hide_activation_key(self) -> str:
        return hide_activation_key(self.slug)


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of :meth:`IdentityContract.verify`."""

    identity: ExtensionIdentity
    missing: tuple[MissingIdentityField, ...] = ()

    @property
    def warnings(self) -> list[str]:
        return [problem.message for problem in self.missing]


class IdentityContract:
    """Validate declared identities against :data:`REQUIRED_FIELDS`."""

    def __init__(self, translate: Callable[[str], str] | None = None) -> None:
        self._translate = translate or (lambda text: text)

    def verify(
        self,
        config: IdentityConfig,
        *,
        is_base_class: bool,
        owner: str,
    ) -> VerificationResult:
        """Return the completed identity and one problem per missing field.

        Args:
            config: Identity declared by the extension class.
            is_base_class: Whether ``owner`` is the base class itself, which
                relies on the fallbacks and gets no warnings.
            owner: Class name used in warnings.
        """
        values = config.model_dump()
        # The slug follows the declared display name, then the declared name.
        slug_source = next(
            (values[key] for key in ("display_name", "name") if not is_empty(values.get(key))),
            None,
        )
        # A display name is enough to name the extension.
        if is_empty(values.get("name")) and not is_empty(values.get("display_name")):
            values["name"] = values["display_name"]

        missing: list[MissingIdentityField] = []
        for field_name, fallback in REQUIRED_FIELDS.items():
            if not is_empty(values.get(field_name)):
                continue
            values[field_name] = fallback
            if is_base_class:
                continue
            message = f"{self._translate(MISSING_FIELD_MESSAGE % field_name)} `{owner}`"
            missing.append(MissingIdentityField(field_name, owner, message=message))

        if is_empty(values.get("version")):
            values["version"] = DEFAULT_VERSION

        slug = slugify(slug_source if slug_source is not None else values["display_name"])
        identity = ExtensionIdentity(slug=slug, **values)
        log = get_logger(__name__, extension=slug)
        for problem in missing:
            log.warning(
                "%s does not declare identity field %s",
                owner,
                problem.field,
                extra={"identity_field": problem.field},
            )
        return VerificationResult(identity=identity, missing=tuple(missing))
