"""Types for module-info indexes and decoded module records."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True, slots=True)
class Entry:
    """One `(name, payload)` pair; the payload is a span into the document."""

    name: str
    start: int
    end: int
    lineno: int

    def payload(self, document: str) -> str:
        return document[self.start : self.end]


class ModuleRecord(BaseModel):
    """Decoded shape of one module payload, shared by every schema revision."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(alias="module_name")
    path: list[str]
    installed: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    class_: list[str] = Field(alias="class")
    supported_variants: list[str] = Field(default_factory=list)
    shared_libs: list[str] = Field(default_factory=list)
    static_libs: list[str] = Field(default_factory=list)
    system_shared_libs: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    test_config: list[str] = Field(default_factory=list)


class LegacyModuleRecord(ModuleRecord):
    """Earlier module-info revision: tags and test_config were always emitted."""

    installed: list[str]
    dependencies: list[str]
    tags: list[str]
    test_config: list[str]
