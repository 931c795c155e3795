from dataclasses import dataclass, field, replace
from typing import FrozenSet

# Presence-only HTML attributes: rendered bare when truthy, dropped otherwise.
DEFAULT_BOOLEAN_ATTRIBUTES: FrozenSet[str] = frozenset(
    {
        "allowfullscreen",
        "async",
        "autofocus",
        "autoplay",
        "checked",
        "controls",
        "default",
        "defer",
        "disabled",
        "formnovalidate",
        "hidden",
        "inert",
        "ismap",
        "itemscope",
        "loop",
        "multiple",
        "muted",
        "nomodule",
        "novalidate",
        "open",
        "playsinline",
        "readonly",
        "required",
        "reversed",
        "selected",
    }
)


@dataclass(frozen=True)
class TemplateConfig:
    """Build-time options for tag nodes.

    Args:
        boolean_attributes: attribute names treated as presence-only.
        omit_empty_class: drop ``class`` entirely when no class survives,
            instead of rendering ``class=""``.
    """

    boolean_attributes: FrozenSet[str] = field(
        default_factory=lambda: DEFAULT_BOOLEAN_ATTRIBUTES
    )
    omit_empty_class: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "boolean_attributes",
            frozenset(name.lower() for name in self.boolean_attributes),
        )

    def is_boolean(self, name: str) -> bool:
        return name.lower() in self.boolean_attributes

    def with_boolean_attributes(self, *names: str) -> "TemplateConfig":
        return replace(self, boolean_attributes=self.boolean_attributes | set(names))


DEFAULT_CONFIG = TemplateConfig()
