from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class WorkflowItem(BaseModel):
    """
    Standard unit of data passed between nodes.

    Binary data (files) are always kept apart from JSON data. ``pairedItem``
    points back at the index of the input item that produced this one.
    """
    model_config = ConfigDict(populate_by_name=True)

    json_data: Dict[str, Any] = Field(default_factory=dict, alias="json")
    binary_data: Dict[str, Any] = Field(default_factory=dict, alias="binary")
    paired_item: Optional[int] = Field(None, alias="pairedItem")
    error: Optional[str] = None
