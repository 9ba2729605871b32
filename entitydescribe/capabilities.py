from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Capability(Enum):
    """Closed set of capabilities an entity provider can declare."""

    RESOLVABLE = "Resolvable"
    CREATEABLE = "Createable"
    UPDATEABLE = "Updateable"
    DELETEABLE = "Deleteable"
    COLLECTION_RESOLVABLE = "CollectionResolvable"
    INPUTABLE = "Inputable"
    OUTPUTABLE = "Outputable"
    DESCRIBE_DEFINEABLE = "DescribeDefineable"

    @property
    def short_name(self) -> str:
        return self.value

    @property
    def qualified_name(self) -> str:
        return f"{__name__}.{self.value}"


class ViewKind(Enum):
    LIST = "list"
    NEW = "new"
    SHOW = "show"
    EDIT = "edit"
    DELETE = "delete"


@dataclass(frozen=True)
class EntityReference:
    """Points at one entity (or, with an empty id, at the prefix space)."""

    prefix: str
    id: str = ""


@dataclass(frozen=True)
class CustomAction:
    """A named non-CRUD operation exposed by a prefix."""

    action: str
    view_key: str
    description: Optional[str] = None
