from enum import Enum
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Enums ---
class NodeCategory(str, Enum):
    TRIGGER = "TRIGGER"
    ACTION = "ACTION"


# --- Models ---
class DisplayConfiguration(BaseModel):
    """
    Configuration for hiding/showing fields.
    """
    show: Optional[Dict[str, List[Any]]] = None
    hide: Optional[Dict[str, List[Any]]] = None


class TypeOptions(BaseModel):
    """
    Advanced options for specific input types.
    """
    model_config = ConfigDict(extra="allow")

    password: Optional[bool] = None
    multipleValues: Optional[bool] = None
    minValue: Optional[float] = None
    maxValue: Optional[float] = None


class SelectOption(BaseModel):
    label: str
    value: Any
    description: Optional[str] = None


class NodeInput(BaseModel):
    """
    Definition of a single input field in the node.
    """
    name: str
    type: str  # string, number, boolean, select, multiselect, collection, fixedCollection, date
    label: str
    default: Optional[Any] = None
    description: Optional[str] = None
    required: bool = False
    placeholder: Optional[str] = None

    # Polymorphic options: Select OR Nested inputs
    options: Optional[Union[List["NodeInput"], List[SelectOption], List[Dict[str, Any]]]] = None

    displayOptions: Optional[DisplayConfiguration] = None
    typeOptions: Optional[TypeOptions] = None


NodeInput.model_rebuild()


class NodeOutput(BaseModel):
    name: str
    type: str
    label: Optional[str] = None
    description: Optional[str] = None


class CredentialRequirement(BaseModel):
    name: str
    required: bool = True


class NodeManifest(BaseModel):
    """
    Node package manifest (manifest.json).
    """
    model_config = ConfigDict(extra="allow")

    id: str
    version: str = "1.0.0"
    name: str
    displayName: Optional[str] = Field(default=None, validate_default=True)

    description: str
    category: NodeCategory
    service: Optional[str] = "onetap"

    icon: Optional[str] = None

    inputs: List[NodeInput] = []
    outputs: List[NodeOutput] = []

    polling: bool = False
    webhook: bool = False

    credentials: List[CredentialRequirement] = []
    tags: List[str] = []
    author: str = "OneTap"

    @field_validator("displayName", mode="before")
    def set_display_name(cls, v, values):
        if not v and "name" in values.data:
            return values.data["name"]
        return v
