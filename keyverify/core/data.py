# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

import json
from dataclasses import Field, dataclass
from dataclasses import fields as get_fields
from dataclasses import is_dataclass, replace
from datetime import datetime
from enum import Enum
from typing import (
    Annotated, Any, Callable, ClassVar, Collection, Dict, ForwardRef,
    Iterable, List, Mapping, Optional, Sequence, Tuple, Type, TypeVar, Union,
    get_origin,
)

import typingplus

from .errors import KeyVerifyError
from .logging import LOG
from .utils import DictS, NoneType, T, deep_find_parent_classes

Loaders   = Dict[Union[str, Type], Callable[[Any], Any]]
Dumpers   = Dict[Union[str, Type], Callable[[Type["JSON"], Any], Any]]
JSONT     = TypeVar("JSONT", bound="JSON")
WireEnumT = TypeVar("WireEnumT", bound="WireEnum")
_Missing  = object()

_Runtime = object()
Runtime  = Annotated[T, _Runtime]


@dataclass
class UnknownVariant(KeyVerifyError):
    enum:  Type["WireEnum"]
    value: Any


class WireEnum(Enum):
    """An Enum whose member values are their exact on-the-wire strings.

    Values are always spelled out, never generated from member names:
    depending on the enum they can be snake_case, kebab-case or dotted
    tags like `m.sas.v1`.

    Example:
    >>> class Fruits(WireEnum): blood_orange = "blood-orange"
    >>> Fruits.decode("blood-orange")
    <Fruits.blood_orange: 'blood-orange'>
    >>> str(Fruits.blood_orange)
    'blood-orange'
    """

    def __str__(self) -> str:
        return self.encode()


    def encode(self) -> str:
        return self.value


    @classmethod
    def decode(cls: Type[WireEnumT], value: Any) -> WireEnumT:
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass

        raise UnknownVariant(cls, value)


    @classmethod
    def decode_known(
        cls: Type[WireEnumT], values: Iterable[Any],
    ) -> List[WireEnumT]:
        """Decode `values`, skipping (and logging) those we don't know of."""

        known: List[WireEnumT] = []

        for value in values:
            with LOG.report(UnknownVariant, level="DEBUG"):
                known.append(cls.decode(value))

        return known


    @classmethod
    def wire_values(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


class JSONLoadError(KeyVerifyError):
    pass


@dataclass
class JSON:
    aliases: ClassVar[Runtime[Dict[str, Union[str, Sequence[str]]]]] = {}

    # Matrix API doesn't like getting floats for time-related stuff
    dumpers: ClassVar[Runtime[Dumpers]] = {
        Enum:     lambda cls, v: v.value,
        datetime: lambda cls, v: round(v.timestamp() * 1000),
    }

    loaders: ClassVar[Runtime[Loaders]] = {
        datetime: lambda v: datetime.fromtimestamp(v / 1000),
    }


    @property
    def dict(self) -> DictS:
        data: DictS = {}

        for f in fields_and_classvars(self):
            value          = getattr(self, f.name)
            unset_optional = f.default is None and value is None

            if annotation_is_runtime(f.type) or unset_optional:
                continue

            path = self.aliases.get(f.name, f.name)
            path = (path,) if isinstance(path, str) else path
            dct  = data

            for part in path[:-1]:
                dct = dct.setdefault(part, {})

            dct[path[-1]] = self._dump(value, f.name)

        return data


    @property
    def json(self) -> str:
        return json.dumps(self.dict, indent=4, ensure_ascii=False)


    @classmethod
    def from_dict(cls: Type[JSONT], data: DictS) -> JSONT:
        if not isinstance(data, dict):
            raise JSONLoadError(data, dict, "Expected dict")

        fields = {}

        for f in get_fields(cls):
            path  = cls.aliases.get(f.name, f.name)
            path  = (path,) if isinstance(path, str) else path
            value = data

            for part in path:
                if not isinstance(value, dict):
                    value = _Missing
                    break

                value = value.get(part, _Missing)
                if value is _Missing:
                    break

            if value is not _Missing:
                fields[f.name] = cls._load(f.type, value, f.name)

        try:
            return cls(**fields)  # type: ignore
        except TypeError as e:
            raise JSONLoadError(cls, fields, next(iter(e.args), ""))


    @classmethod
    def from_json(cls: Type[JSONT], data: str) -> JSONT:
        return cls.from_dict(json.loads(data))


    def but(self: JSONT, **fields) -> JSONT:
        return replace(self, **fields)


    @classmethod
    def _dump(cls, value: Any, name: Optional[str] = None) -> Any:
        # Use any dumper that suits this value to convert it first

        if name and name in cls.dumpers:
            value = cls.dumpers[name](cls, value)

        if type(value) in cls.dumpers:
            value = cls.dumpers[type(value)](cls, value)

        for parent in deep_find_parent_classes(type(value)):
            if parent in cls.dumpers:
                return cls.dumpers[parent](cls, value)

        # Process nested structures

        if is_dataclass(value) and isinstance(value, JSON):
            return value.dict

        if isinstance(value, Mapping):
            return {
                cls._dump_dict_key(k): cls._dump(v) for k, v in value.items()
            }

        is_text = isinstance(value, (str, bytes))

        if isinstance(value, Collection) and not is_text:
            return [cls._dump(v) for v in value]

        # Single value that has already been dumped by a suitable dumper if any

        return value


    @classmethod
    def _dump_dict_key(cls, key: Any) -> str:
        if isinstance(key, str):
            return key

        key = cls._dump(key)
        if isinstance(key, str):
            return key

        return json.dumps(key, ensure_ascii=False)


    @classmethod
    def _load(
        cls,
        annotation: Any,
        value:      Any,
        field_name: Optional[str] = None,
    ) -> Any:

        typ   = unwrap_annotated(annotation)
        value = cls._apply_loader(typ, value, field_name)

        if is_subclass(typ, JSON) and isinstance(value, Mapping):
            return typ.from_dict(dict(value))

        value = cls._auto_cast(typ, value)
        typo  = getattr(typ, "__bound__", typ)
        typo  = getattr(typo, "__origin__", typo)

        if typo is Union or isinstance(typo, (str, ForwardRef)):
            return value

        if is_subclass(typo, Mapping) and isinstance(value, Mapping):
            key_type, value_type = getattr(typ, "__args__", (Any, Any))
            key_type_origin      = getattr(key_type, "__origin__", key_type)
            text_key             = is_subclass(key_type_origin, (str, Enum))

            dct = {
                cls._load(key_type, k if text_key else cls._load_key(k)):
                    cls._load(value_type, v) for k, v in value.items()
            }

            try:
                return getattr(typ, "__origin__", typ)(dct)
            except TypeError:  # happens for abstract Mapping
                return dct

        if isinstance(value, (str, bytes)):
            return value

        if is_subclass(typo, Collection) and isinstance(value, Collection):
            items: Collection

            if is_subclass(typo, tuple):
                item_types = getattr(typ, "__args__", (Any, ...))

                if ... not in item_types and len(item_types) != len(value):
                    raise JSONLoadError(
                        cls, annotation, value,
                        f"Expected {len(item_types)} items",
                    )

                items = tuple(
                    cls._load(item_types[0 if ... in item_types else i], v)
                    for i, v in enumerate(value)
                )
            else:
                item_type = getattr(typ, "__args__", (Any,))[0]
                items     = [cls._load(item_type, v) for v in value]

            try:
                return getattr(typ, "__origin__", typ)(items)
            except TypeError:  # happens for abstract Sequence/Collection
                return items

        return value


    @classmethod
    def _load_key(cls, key: str) -> Any:
        # JSON object keys are always strings, other key types are encoded
        try:
            return json.loads(key)
        except ValueError as e:
            raise JSONLoadError(cls, key, e)


    @classmethod
    def _get_loadable_type(cls, annotation: Any, value: Any) -> Optional[Type]:
        # __bound__ is for `TypeVar`s, __origin__ for parameterized annotations
        typ = getattr(annotation, "__bound__", annotation)
        typ = getattr(typ, "__origin__", typ)

        if typ is Union:
            # Warning: Unions with exotic types requiring conversion won't
            # be handled automatically, we can't know which type to use
            choices = annotation.__args__
            if len(choices) == 2 and NoneType in choices:
                non_none = next(a for a in choices if a is not NoneType)
                typ      = NoneType if value is None else non_none
            else:
                for choice in choices:
                    origin = getattr(choice, "__origin__", choice)
                    if choice is Any or isinstance(value, origin):
                        typ = choice
                        break

            typ = getattr(typ, "__bound__", typ)
            typ = getattr(typ, "__origin__", typ)

        return typ if isinstance(typ, type) and typ is not Any else None


    @classmethod
    def _apply_loader(
        cls,
        annotation: Any,
        value:      Any,
        field_name: Optional[str] = None,
    ) -> Any:

        if field_name and field_name in cls.loaders:
            try:
                return cls.loaders[field_name](value)
            except UnknownVariant:
                raise
            except Exception as e:  # noqa
                raise JSONLoadError(cls, field_name, annotation, value, e)

        typ = cls._get_loadable_type(annotation, value)
        if not typ:
            return value

        if typ in cls.loaders:
            try:
                return cls.loaders[typ](value)
            except Exception as e:  # noqa
                raise JSONLoadError(cls, typ, value, e)

        for parent in deep_find_parent_classes(typ):
            if parent in cls.loaders:
                try:
                    return cls.loaders[parent](value)
                except Exception as e:  # noqa
                    raise JSONLoadError(cls, parent, value, e)

        return value


    @classmethod
    def _auto_cast(cls, annotation: Any, value: Any) -> Any:
        typ = cls._get_loadable_type(annotation, value)

        if typ is None:
            return value

        if issubclass(typ, WireEnum):
            return value if isinstance(value, typ) else typ.decode(value)

        cls._check_shape(annotation, typ, value)

        try:
            return typingplus.cast(typ, value)
        except Exception as e:  # noqa
            raise JSONLoadError(cls, annotation, value, e)


    @classmethod
    def _check_shape(cls, annotation: Any, typ: Type, value: Any) -> None:
        # typingplus would happily turn "abc" into ["a", "b", "c"],
        # a dict into a list of its keys or a list into a string

        is_object = isinstance(value, Mapping)
        is_array  = isinstance(value, (list, tuple))

        if issubclass(typ, (Mapping, JSON)) and not is_object:
            raise JSONLoadError(cls, annotation, value, "Expected an object")

        if issubclass(typ, (str, bytes)) and (is_object or is_array):
            raise JSONLoadError(cls, annotation, value, "Expected a string")

        text_or_map = issubclass(typ, (str, bytes, Mapping))

        if issubclass(typ, Collection) and not text_or_map and not is_array:
            raise JSONLoadError(cls, annotation, value, "Expected an array")


def dump_json(value: Any, **dumps_kwargs) -> str:
    """Serialize a value, a collection of them or a `JSON` to JSON text."""
    return json.dumps(JSON._dump(value), ensure_ascii=False, **dumps_kwargs)


def load_json(annotation: Any, data: str) -> Any:
    """Parse JSON text into an object matching the `annotation` type.

    Example:
    >>> load_json(List[HashAlgorithm], '["sha256"]')
    [<HashAlgorithm.sha256: 'sha256'>]
    """

    return JSON._load(annotation, json.loads(data))


def annotation_is_runtime(ann: Any) -> bool:
    if get_origin(ann) is ClassVar and ann.__args__:
        ann = ann.__args__[0]
    return get_origin(ann) is Annotated and _Runtime in ann.__metadata__


def unwrap_annotated(ann: Any) -> Any:
    return ann.__origin__ if get_origin(ann) is Annotated else ann


def fields_and_classvars(datacls) -> Tuple[Field, ...]:
    return tuple(datacls.__dataclass_fields__.values())


def is_subclass(value: Any, typ: Any) -> bool:
    if value is Any or typ is Any:
        return typ is value
    return isinstance(value, type) and issubclass(value, typ)
