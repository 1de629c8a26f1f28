"""Extension introspection - read-only access to registered extensions."""

from typing import Any

from graft.extensions.aware import ExtensionAware
from graft.extensions.registry import ExtensionRegistry
from graft.models.extension import ExtensionEntry, ExtensionSchema


class ExtensionIntrospector:
    """Provides read-only introspection into a registry.

    Used to:
    - Explain what a host object has been extended with
    - Debug failed lookups
    """

    def schema(self, registry: ExtensionRegistry) -> list[ExtensionSchema]:
        """Public name and type of every extension, in registration order."""
        return registry.schema()

    def get_members(self, entry: ExtensionEntry) -> list[str]:
        """Public attribute names of an extension instance."""
        return sorted(name for name in dir(entry.instance) if not name.startswith("_"))

    def describe(self, registry: ExtensionRegistry, max_depth: int = 3) -> list[dict[str, Any]]:
        """Describe each extension, following nested registries.

        Returns:
            List of {name, declared_type, runtime_type, nested}
        """
        described = []
        for entry in registry.entries():
            nested: list[dict[str, Any]] = []
            if max_depth > 1 and isinstance(entry.instance, ExtensionAware):
                nested = self.describe(entry.instance.extensions, max_depth - 1)

            described.append({
                "name": entry.name,
                "declared_type": entry.public_type,
                "runtime_type": type(entry.instance).__qualname__,
                "nested": nested,
            })
        return described

    def to_display_string(self, registry: ExtensionRegistry) -> str:
        """Format the registry contents for diagnostics."""
        if not len(registry):
            return "No extensions registered."

        lines = []

        def render(items: list[dict[str, Any]], indent: int) -> None:
            for item in items:
                lines.append(f"{'  ' * indent}- {item['name']}: {item['declared_type']}")
                render(item["nested"], indent + 1)

        render(self.describe(registry), 0)
        return "\n".join(lines)
