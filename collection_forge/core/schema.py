"""
Collection schema definitions.

A ``CollectionSchema`` maps field names to ``FieldSpec`` descriptors. The
schema is the one place where field permissions are evaluated: mutators,
GraphQL type generation and form fragments all ask it which fields an actor
may create, read or update.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from .exceptions import ImproperlyConfiguredCollection
from .permissions import (
    GUESTS,
    Actor,
    Operation,
    PermissionRule,
    check_rule,
    normalize_rule,
)

ID_FIELD = "_id"

SUPPORTED_TYPES = (str, int, float, bool, dict, list)


@dataclass
class FieldSpec:
    """
    Descriptor for one collection field.

    Attributes:
        type: Python type of the stored value
        optional: When False the field must be supplied on create
        can_create: Groups (or predicate) allowed to set the field on create
        can_read: Groups (or predicate) allowed to see the field
        can_update: Groups (or predicate) allowed to change the field
        on_create: ``fn(document=..., current_user=..., collection=..., context=...)``
            computing the value at creation time
        on_update: ``fn(data=..., document=..., current_user=..., collection=..., context=...)``
            computing the value at update time
        label: Human readable label used by forms
        description: Field documentation, exposed in the GraphQL schema
        hidden: Exclude the field from generated form fields
        default: Initial value offered by "new" forms
    """

    type: type = str
    optional: bool = False
    can_create: PermissionRule = None
    can_read: PermissionRule = None
    can_update: PermissionRule = None
    on_create: Optional[Callable[..., Any]] = None
    on_update: Optional[Callable[..., Any]] = None
    label: Optional[str] = None
    description: Optional[str] = None
    hidden: bool = False
    default: Any = None

    def __post_init__(self):
        if self.type not in SUPPORTED_TYPES:
            raise ImproperlyConfiguredCollection(
                f"Unsupported field type {self.type!r}"
            )
        self.can_create = normalize_rule(self.can_create)
        self.can_read = normalize_rule(self.can_read)
        self.can_update = normalize_rule(self.can_update)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FieldSpec":
        """Build a spec from a plain descriptor, accepting camelCase keys."""
        aliases = {
            "canCreate": "can_create",
            "canRead": "can_read",
            "canUpdate": "can_update",
            "onCreate": "on_create",
            "onUpdate": "on_update",
        }
        valid_fields = set(cls.__dataclass_fields__.keys())
        kwargs = {}
        for key, value in payload.items():
            name = aliases.get(key, key)
            if name not in valid_fields:
                raise ImproperlyConfiguredCollection(
                    f"Unknown field descriptor key '{key}'", field=key
                )
            kwargs[name] = value
        return cls(**kwargs)

    def rule_for(self, operation: Operation) -> Any:
        if operation is Operation.CREATE:
            return self.can_create
        if operation is Operation.UPDATE:
            return self.can_update
        return self.can_read

    def allows(
        self, actor: Actor, operation: Operation, document: Optional[dict] = None
    ) -> bool:
        return check_rule(self.rule_for(operation), actor, document)

    def accepts_value(self, value: Any) -> bool:
        if self.type is float:
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if self.type is int:
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, self.type)


class CollectionSchema:
    """Ordered mapping of field names to ``FieldSpec`` descriptors."""

    def __init__(self, fields: Mapping[str, Any]):
        self._fields: dict[str, FieldSpec] = {}
        if ID_FIELD not in fields:
            self._fields[ID_FIELD] = FieldSpec(
                type=str, optional=True, can_read=[GUESTS]
            )
        for name, spec in fields.items():
            if isinstance(spec, Mapping):
                spec = FieldSpec.from_dict(spec)
            if not isinstance(spec, FieldSpec):
                raise ImproperlyConfiguredCollection(
                    f"Field '{name}' must be a FieldSpec or a dict", field=name
                )
            self._fields[name] = spec

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __getitem__(self, name: str) -> FieldSpec:
        return self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def items(self):
        return self._fields.items()

    def get(self, name: str) -> Optional[FieldSpec]:
        return self._fields.get(name)

    @property
    def field_names(self) -> list[str]:
        return list(self._fields)

    def allowed_fields(
        self,
        actor: Actor,
        operation: Operation,
        document: Optional[dict] = None,
    ) -> list[str]:
        """Names of the fields ``actor`` may use for ``operation``, in schema order."""
        return [
            name
            for name, spec in self._fields.items()
            if spec.allows(actor, operation, document)
        ]

    def fields_with_rule(self, operation: Operation) -> list[str]:
        """Fields that grant ``operation`` to at least one group."""
        return [
            name
            for name, spec in self._fields.items()
            if spec.rule_for(operation) is not None
        ]

    def restrict_view(self, actor: Actor, document: Optional[dict]) -> Optional[dict]:
        """
        Return the projection of ``document`` readable by ``actor``.

        Declared fields the actor cannot read are removed. Keys the schema
        does not declare (added by ``after`` callbacks, for instance) are
        kept.
        """
        if document is None:
            return None
        readable = set(self.allowed_fields(actor, Operation.READ, document))
        return {
            key: value
            for key, value in document.items()
            if key in readable or key not in self._fields
        }

    def required_fields(self) -> list[str]:
        return [
            name
            for name, spec in self._fields.items()
            if not spec.optional and spec.on_create is None and name != ID_FIELD
        ]


def restrict_view(
    schema: CollectionSchema, actor: Actor, document: Optional[dict]
) -> Optional[dict]:
    return schema.restrict_view(actor, document)


def iter_documents_view(
    schema: CollectionSchema, actor: Actor, documents: Iterable[dict]
) -> list[dict]:
    return [schema.restrict_view(actor, document) for document in documents]
