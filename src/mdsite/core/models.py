"""Content, navigation, and compiled-document models shared across the pipeline"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, ValidatorFunctionWrapHandler, field_validator


logger = logging.getLogger(__name__)

IR_FORMAT = "mdsite-ir/1"


class Category(str, Enum):
    """Content collections recognized by the site"""
    docs = "docs"
    blog = "blog"


class ContentMetadata(BaseModel):
    """Frontmatter of a content file. Unknown keys are kept as extras."""
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    title:        str
    description:  Optional[str] = None
    date:         Optional[str] = None
    category:     Optional[str] = None
    tags:         list[str] = []
    author:       Optional[str] = None
    order:        Optional[int] = None
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")
    draft:        bool = False

    @field_validator("date", "last_updated", mode="before")
    @classmethod
    def _iso_date(cls, value: Any) -> Any:
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _tag_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator(
        "description", "date", "category", "tags", "author", "order", "last_updated", "draft",
        mode="wrap",
    )
    @classmethod
    def _default_on_mismatch(cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo) -> Any:
        """Only title can reject a file; any other mistyped field falls back to its default."""
        try:
            return handler(value)
        except ValidationError as e:
            logger.warning("Ignoring frontmatter field %s=%r: %s", info.field_name, value, e.errors()[0]["msg"])
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class ReadingTime(BaseModel):
    text:    str
    minutes: float
    words:   int


class ContentItem(BaseModel):
    """One assembled content file: the unit consumed by listings, navigation, and rendering."""
    slug:             str
    category:         Category
    path:             str
    frontmatter:      ContentMetadata
    content:          str                 # body without frontmatter; raw-render fallback
    compiled_content: str = ""            # serialized CompiledDocument; "" when compilation failed
    reading_time:     ReadingTime


class NavItem(BaseModel):
    title: str
    href:  str
    order: Optional[int] = None


class NavSection(BaseModel):
    title: str
    items: list[NavItem] = []


# --- compiled intermediate representation ---

class NodeKind(str, Enum):
    """Closed set of node variants emitted by the compiler"""
    text = "text"
    element = "element"
    component = "component"
    raw = "raw"


class Node(BaseModel):
    kind:     NodeKind
    tag:      Optional[str] = None                  # element tag or component name
    props:    dict[str, Any] = {}
    text:     Optional[str] = None                  # payload of text/raw nodes
    children: list["Node"] = []
    lines:    Optional[tuple[int, int]] = None      # development only: 1-based source span


class CompiledDocument(BaseModel):
    """Serialized program executed by the runtime renderer."""
    format:      Literal["mdsite-ir/1"] = IR_FORMAT
    unit:        str
    development: bool = False
    children:    list[Node] = []


# --- explicit result variants ---

@dataclass(frozen=True)
class ScanResult:
    """Files discovered under a category root; missing_root marks an absent directory."""
    root:         Path
    files:        list[Path] = field(default_factory=list)
    missing_root: bool = False


@dataclass(frozen=True)
class CompileResult:
    code:  Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.code is not None
