"""Resource references accepted by the access resolver.

A reference is an opaque ``(kind, id)`` pair. The resolver never checks that
the referenced row exists; that is up to the caller.
"""

from dataclasses import dataclass

from app.errors import InvalidArgumentError, InvalidResourceError
from app.models.enums import ResourceType

@dataclass(frozen=True)
class ChecklistTemplateRef:
    id: int
    type = ResourceType.checklist_template

@dataclass(frozen=True)
class ProjectRef:
    id: int
    type = ResourceType.project

ResourceRef = ChecklistTemplateRef | ProjectRef

_REF_BY_TYPE: dict[ResourceType, type] = {
    ResourceType.checklist_template: ChecklistTemplateRef,
    ResourceType.project: ProjectRef,
}

def resource_ref(resource_type: ResourceType | str, resource_id: int) -> ResourceRef:
    try:
        kind = ResourceType(resource_type)
    except ValueError:
        raise InvalidResourceError(f"unknown resource type: {resource_type!r}") from None
    try:
        ref_id = int(resource_id)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"invalid resource id: {resource_id!r}") from None
    return _REF_BY_TYPE[kind](id=ref_id)

def check_resource_ref(resource: object) -> ResourceRef:
    if not isinstance(resource, (ChecklistTemplateRef, ProjectRef)):
        raise InvalidResourceError(f"unsupported resource reference: {resource!r}")
    return resource
