"""Blueprint registry for the StudyVault feature modules.

Every feature package under ``studyvault_app.modules`` exposes ``blueprint``
in its ``__init__`` and attaches its views in ``routes``. A
``ModuleDefinition`` names the package; loading it imports the routes first
so the blueprint is complete when it is registered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from flask import Blueprint, Flask
from werkzeug.utils import import_string

MODULES_PACKAGE = "studyvault_app.modules"


@dataclass(frozen=True)
class ModuleDefinition:
    """One feature package and where its blueprint is mounted."""

    package: str
    url_prefix: Optional[str] = None
    attribute: str = "blueprint"
    views: Optional[str] = "routes"

    @property
    def import_path(self) -> str:
        if "." in self.package:
            return self.package
        return f"{MODULES_PACKAGE}.{self.package}"

    def load_blueprint(self) -> Blueprint:
        if self.views:
            import_string(f"{self.import_path}.{self.views}")
        blueprint = getattr(import_string(self.import_path), self.attribute, None)
        if not isinstance(blueprint, Blueprint):
            raise TypeError(
                f"{self.import_path}.{self.attribute} is {type(blueprint).__name__}, not a Blueprint"
            )
        return blueprint


def register_modules(app: Flask, modules: Sequence[ModuleDefinition]) -> List[str]:
    """Register ``modules`` in order; returns the blueprint names."""

    names = []
    for module in modules:
        blueprint = module.load_blueprint()
        app.register_blueprint(blueprint, url_prefix=module.url_prefix)
        names.append(blueprint.name)
        app.logger.debug("Mounted %s at %s", blueprint.name, module.url_prefix or "/")
    return names


def register_default_modules(app: Flask) -> List[str]:
    return register_modules(app, DEFAULT_MODULES)


DEFAULT_MODULES: Sequence[ModuleDefinition] = (
    ModuleDefinition("dashboard"),
    ModuleDefinition("courses", url_prefix="/courses"),
    ModuleDefinition("questions", url_prefix="/questions"),
    ModuleDefinition("tags", url_prefix="/tags"),
    ModuleDefinition("study", url_prefix="/study"),
    ModuleDefinition("admin", url_prefix="/admin"),
)
