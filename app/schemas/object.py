"""Input schemas for extracted BI objects and the relationships between them."""
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _normalize_type(value: Any) -> str:
    """Payloads may carry enum values ('contains') or names ('CONTAINS'); normalize to lowercase."""
    if value is None:
        return ""
    if hasattr(value, "value"):
        return (value.value or "").strip().lower()
    return str(value).strip().lower()


class ObjectProperties(BaseModel):
    """
    Base for typed property views over the open `properties` bag.

    Every declared field is optional with a default. Scalars of the wrong type
    are stringified and list fields that are not lists become empty lists, so
    building a view never fails on upstream data. Unknown keys are kept.
    """
    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def coerce_declared_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        out = dict(data)
        for name, field in cls.model_fields.items():
            if name not in out:
                continue
            value = out[name]
            if field.annotation == List[str]:
                if isinstance(value, (list, tuple, set)):
                    out[name] = [str(v) for v in value if v is not None]
                else:
                    out[name] = []
            elif value is not None and not isinstance(value, str):
                out[name] = str(value)
        return out


class VisualizationProperties(ObjectProperties):
    visualization_type: Optional[str] = None
    raw_type: Optional[str] = None
    cognosClass: Optional[str] = None

    @property
    def display_type(self) -> Optional[str]:
        """First available type hint: visualization_type, raw_type, cognosClass."""
        return self.visualization_type or self.raw_type or self.cognosClass


class CalculatedFieldProperties(ObjectProperties):
    calculation_type: Optional[str] = None
    expression: Optional[str] = None
    cognosClass: Optional[str] = None


class FilterProperties(ObjectProperties):
    filter_type: Optional[str] = None
    expression: Optional[str] = None
    referenced_columns: List[str] = Field(default_factory=list)
    parameter_references: List[str] = Field(default_factory=list)


class PromptProperties(ObjectProperties):
    prompt_type: Optional[str] = None
    value: Optional[str] = None


class ReportProperties(ObjectProperties):
    reportType: Optional[str] = None
    report_type: Optional[str] = None
    owner: Optional[str] = None


class DashboardProperties(ObjectProperties):
    owner: Optional[str] = None


class DataModuleProperties(ObjectProperties):
    cognosClass: Optional[str] = None

    @property
    def module_type(self) -> str:
        return self.cognosClass or "dataModule"


class DataSourceProperties(ObjectProperties):
    data_source_type: Optional[str] = None

    @property
    def source_type(self) -> str:
        return self.data_source_type or "Unknown"


# object_type -> typed property view; anything else falls back to ObjectProperties
PROPERTY_MODELS: Dict[str, Type[ObjectProperties]] = {
    "visualization": VisualizationProperties,
    "calculated_field": CalculatedFieldProperties,
    "filter": FilterProperties,
    "prompt": PromptProperties,
    "report": ReportProperties,
    "dashboard": DashboardProperties,
    "data_module": DataModuleProperties,
    "data_source": DataSourceProperties,
}


class ExtractedObject(BaseModel):
    id: str
    object_type: str
    name: str = ""
    path: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

    @field_validator("object_type", mode="before")
    @classmethod
    def normalize_object_type(cls, v):
        return _normalize_type(v)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v):
        return "" if v is None else str(v)

    @field_validator("properties", mode="before")
    @classmethod
    def coerce_properties(cls, v):
        return v if isinstance(v, dict) else {}

    def typed_properties(self) -> ObjectProperties:
        """Validated view of `properties` for this object's type."""
        model = PROPERTY_MODELS.get(self.object_type, ObjectProperties)
        return model.model_validate(self.properties)

    def __repr__(self):
        return f"<ExtractedObject {self.object_type}: {self.name}>"


class ObjectRelationship(BaseModel):
    source_object_id: str
    target_object_id: str
    relationship_type: str
    details: Optional[Any] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("source_object_id", "target_object_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        return str(v)

    @field_validator("relationship_type", mode="before")
    @classmethod
    def normalize_relationship_type(cls, v):
        return _normalize_type(v)

    def __repr__(self):
        return f"<Relationship {self.relationship_type}>"
