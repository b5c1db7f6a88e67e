from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator

from cargo_add.config import DEFAULT_VERSION_REQ
from cargo_add.manifest import Dependency


class DependencySpec(BaseModel):
    name: str = Field(min_length=1)
    version: str | None = None
    git: str | None = None
    path: str | None = None
    optional: bool = False

    @model_validator(mode="after")
    def _single_source(self) -> DependencySpec:
        sources = [value for value in (self.version, self.git, self.path) if value is not None]
        if len(sources) > 1:
            raise ValueError("version, git and path are mutually exclusive")
        return self

    def to_dependency(self) -> Dependency:
        if self.git is None and self.path is None and not self.optional:
            return self.name, self.version or DEFAULT_VERSION_REQ

        spec: dict[str, Any] = {}
        if self.git is not None:
            spec["git"] = self.git
        elif self.path is not None:
            spec["path"] = self.path
        else:
            spec["version"] = self.version or DEFAULT_VERSION_REQ
        if self.optional:
            spec["optional"] = True
        return self.name, spec
