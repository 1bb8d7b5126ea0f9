"""
Models for appc pod manifests as consumed by rkt.

Only the fields the pod workflow reads or rewrites are modelled; every
other key of the template is kept as an extra field and written back out
unchanged.
"""
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, ConfigDict, Field, field_validator

AC_KIND = "PodManifest"
AC_VERSION = "0.8.11"


class ManifestModel(BaseModel):
    """
    Base for manifest fragments: camelCase on the wire, unknown keys preserved.
    """
    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)


class Label(ManifestModel):
    """
    A single name/value label attached to an image.
    """
    name: str
    value: str = ""


class RuntimeImage(ManifestModel):
    """
    Image reference of a runtime app: a name, an optional content
    identifier and the labels used to pick schema and version.
    """
    name: str = ""
    id: Optional[str] = None
    labels: List[Label] = []

    @field_validator("labels", mode="before")
    @classmethod
    def _labels_from_mapping(cls, value: Any) -> Any:
        # Templates may write labels as a plain mapping.
        if isinstance(value, dict):
            return [{"name": k, "value": "" if v is None else v} for k, v in value.items()]
        if value is None:
            return []
        return value

    def label(self, name: str) -> str:
        """
        Returns the value of the last label called ``name``, or an empty string.
        """
        value = ""
        for label in self.labels:
            if label.name == name:
                value = label.value
        return value


class EnvironmentVariable(ManifestModel):
    name: str
    value: str = ""


class App(ManifestModel):
    """
    Execution settings of a runtime app.
    """
    exec_: Optional[List[str]] = Field(default=None, alias="exec")
    user: str = ""
    group: str = ""
    working_directory: Optional[str] = Field(default=None, alias="workingDirectory")
    environment: Optional[List[EnvironmentVariable]] = None

    @field_validator("user", "group", mode="before")
    @classmethod
    def _unset_as_empty(cls, value: Any) -> Any:
        # `user:` with no value reads as None
        return "" if value is None else value


class RuntimeApp(ManifestModel):
    """
    One container image of the pod together with how to run it.
    """
    name: str
    image: RuntimeImage = Field(default_factory=RuntimeImage)
    app: App = Field(default_factory=App)
    mounts: Optional[List[Dict[str, Any]]] = None


class Volume(ManifestModel):
    """
    A named host directory made available to the apps of the pod.
    """
    name: str
    kind: str = "host"
    source: Optional[str] = None
    read_only: Optional[bool] = Field(default=None, alias="readOnly")


class PodManifest(ManifestModel):
    """
    The complete pod manifest handed to ``rkt run --pod-manifest``.
    """
    ac_kind: str = Field(default=AC_KIND, alias="acKind")
    ac_version: str = Field(default=AC_VERSION, alias="acVersion")
    apps: List[RuntimeApp] = []
    volumes: List[Volume] = []

    @field_validator("apps", "volumes", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value
