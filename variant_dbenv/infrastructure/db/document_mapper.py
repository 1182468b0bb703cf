"""
Document Mapper
===============

Maps typed domain objects (dataclasses or pydantic models) to BSON-ready
dicts and back.

Mapping rules:
- Simple types (dates, datetimes and BSON-native scalars) are stored as leaf values
- Datetimes are naive UTC: aware values are converted on write, and reads
  (native or string-encoded) always return naive UTC
- Nested dataclasses/models become sub-documents, lists map element-wise
- No type discriminator ("_class") is written; documents keep the declared shape only
- "." in mapping keys is replaced with a placeholder on write and restored on read.
  Keys that already contain the placeholder do not survive: they read back with "."
- The ``id`` attribute is stored as ``_id``
- Dataclass fields can set ``metadata={"field": "name"}`` to use a different stored key

The mapper must be finalized before use.
"""
import dataclasses
import functools
import logging
import types
import typing
import uuid
from collections.abc import Mapping as AbcMapping
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Mapping, Tuple, Type, TypeVar, Union

from bson import ObjectId
from bson.binary import UuidRepresentation
from bson.codec_options import CodecOptions
from bson.decimal128 import Decimal128
from pydantic import BaseModel

from variant_dbenv.core.exceptions import MappingError
from variant_dbenv.infrastructure.db.converters import ScalarConverter
from variant_dbenv.utils.datetime_utils import to_naive_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

ID_FIELD = "id"
MONGO_ID_FIELD = "_id"

# Types stored as leaf values rather than nested documents
SIMPLE_TYPES: Tuple[type, ...] = (
    str, int, float, bool, bytes,
    datetime, date,
    ObjectId, Decimal128, uuid.UUID,
)

# Target types that must have a registered string converter
CONVERTER_TARGETS = frozenset({datetime, date})


@dataclasses.dataclass(frozen=True)
class _FieldSpec:
    name: str
    key: str
    annotation: Any


@functools.lru_cache(maxsize=None)
def _field_specs(cls: type) -> Tuple[_FieldSpec, ...]:
    """Attribute name, stored key and declared type of each mapped field of ``cls``."""
    if dataclasses.is_dataclass(cls):
        hints = typing.get_type_hints(cls)
        specs = []
        for f in dataclasses.fields(cls):
            key = f.metadata.get("field", f.name)
            if f.name == ID_FIELD:
                key = MONGO_ID_FIELD
            specs.append(_FieldSpec(f.name, key, hints.get(f.name, Any)))
        return tuple(specs)
    if issubclass(cls, BaseModel):
        return tuple(
            _FieldSpec(name, MONGO_ID_FIELD if name == ID_FIELD else name, info.annotation)
            for name, info in cls.model_fields.items()
        )
    raise TypeError(f"{cls.__name__} is not a dataclass or pydantic model")


def _is_mapped_class(tp: Any) -> bool:
    return isinstance(tp, type) and (dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel))


def _unwrap_optional(tp: Any) -> Any:
    """Optional[X] -> X; other unions are left alone."""
    if typing.get_origin(tp) in (Union, types.UnionType):
        args = [a for a in typing.get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


class DocumentMapper:
    """
    Converts domain objects to and from stored documents.

    Args:
        converters: String converters keyed by target type; must cover datetime and date
        map_key_dot_replacement: Character written in place of "." in mapping keys
    """

    def __init__(self, converters: Mapping[type, ScalarConverter], map_key_dot_replacement: str = "#") -> None:
        self._converters: Dict[type, ScalarConverter] = dict(converters)
        self._dot_replacement = map_key_dot_replacement
        self._finalized = False
        self.simple_types = SIMPLE_TYPES
        self.codec_options: CodecOptions = CodecOptions(
            tz_aware=False,
            uuid_representation=UuidRepresentation.STANDARD,
        )

    @property
    def is_finalized(self) -> bool:
        return self._finalized

    @property
    def map_key_dot_replacement(self) -> str:
        return self._dot_replacement

    @property
    def converters(self) -> Mapping[type, ScalarConverter]:
        return types.MappingProxyType(self._converters)

    def finalize(self) -> "DocumentMapper":
        """
        Validate the configuration and lock the mapper for use.

        Raises:
            ValueError: If the converter set or the dot replacement is invalid
        """
        if self._finalized:
            return self

        if set(self._converters) != CONVERTER_TARGETS:
            registered = sorted(t.__name__ for t in self._converters)
            raise ValueError(f"Mapper needs exactly the datetime and date converters, got {registered}")
        if len(self._dot_replacement) != 1 or self._dot_replacement in ".$":
            raise ValueError(f"Invalid map key dot replacement '{self._dot_replacement}'")

        self._finalized = True
        logger.debug(
            f"Document mapper finalized (converters: {len(self._converters)}, "
            f"dot replacement: '{self._dot_replacement}')"
        )
        return self

    def _check_finalized(self) -> None:
        if not self._finalized:
            raise RuntimeError("DocumentMapper used before finalize()")

    # ------------------------------------------------------------------
    # Write side
    # ------------------------------------------------------------------

    def to_document(self, obj: Any) -> Dict[str, Any]:
        """Convert a domain object to a stored document."""
        self._check_finalized()
        return self._write_object(obj, type(obj).__name__)

    def _write_object(self, obj: Any, path: str) -> Dict[str, Any]:
        doc: Dict[str, Any] = {}
        for spec in _field_specs(type(obj)):
            value = getattr(obj, spec.name)
            # Absent values are not stored
            if value is None:
                continue
            doc[spec.key] = self._write_value(value, f"{path}.{spec.name}")
        return doc

    def _write_value(self, value: Any, path: str) -> Any:
        if value is None:
            return None
        if isinstance(value, Enum):
            return value.value
        # BSON has no date-only type
        if type(value) is date:
            return datetime(value.year, value.month, value.day)
        if isinstance(value, datetime):
            return to_naive_utc(value)
        if isinstance(value, self.simple_types):
            return value
        if _is_mapped_class(type(value)):
            return self._write_object(value, path)
        if isinstance(value, AbcMapping):
            return {
                self._escape_key(key, path): self._write_value(item, f"{path}[{key}]")
                for key, item in value.items()
            }
        if isinstance(value, (list, tuple, set, frozenset)):
            return [self._write_value(item, f"{path}[]") for item in value]
        raise MappingError(path, value, type(value))

    def _escape_key(self, key: Any, path: str) -> str:
        if not isinstance(key, str):
            raise MappingError(path, key, str)
        return key.replace(".", self._dot_replacement)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    def from_document(self, doc: Mapping[str, Any], document_class: Type[T]) -> T:
        """
        Convert a stored document to an instance of ``document_class``.

        Raises:
            MappingError: If a stored value cannot be converted to its field type
        """
        self._check_finalized()
        return self._read_object(doc, document_class, document_class.__name__)

    def _read_object(self, doc: Mapping[str, Any], cls: Type[T], path: str) -> T:
        kwargs = {}
        for spec in _field_specs(cls):
            if spec.key in doc:
                kwargs[spec.name] = self._read_value(doc[spec.key], spec.annotation, f"{path}.{spec.name}")
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as err:
            raise MappingError(path, doc.get(MONGO_ID_FIELD), cls) from err

    def _read_value(self, value: Any, declared: Any, path: str) -> Any:
        if value is None:
            return None
        declared = _unwrap_optional(declared)
        origin = typing.get_origin(declared)
        args = typing.get_args(declared)

        if declared in self._converters:
            if isinstance(value, str):
                return self._convert(value, declared, path)
            if declared is date and isinstance(value, datetime):
                return value.date()
            if declared is datetime and isinstance(value, datetime):
                return to_naive_utc(value)
            return value
        if origin in (list, set, frozenset, tuple):
            item_type = args[0] if args else Any
            items = [self._read_value(item, item_type, f"{path}[]") for item in value]
            return items if origin is list else origin(items)
        if origin in (dict, AbcMapping):
            item_type = args[1] if len(args) == 2 else Any
            return {
                self._unescape_key(key): self._read_value(item, item_type, f"{path}[{key}]")
                for key, item in value.items()
            }
        if _is_mapped_class(declared):
            return self._read_object(value, declared, path)
        if isinstance(declared, type) and issubclass(declared, Enum):
            try:
                return declared(value)
            except ValueError as err:
                raise MappingError(path, value, declared) from err
        return value

    def _convert(self, value: str, target: type, path: str) -> Any:
        try:
            return self._converters[target](value)
        except ValueError as err:
            raise MappingError(path, value, target) from err

    def _unescape_key(self, key: str) -> str:
        return key.replace(self._dot_replacement, ".")

    @staticmethod
    def get_id(obj: Any) -> Any:
        """Identifier of a domain object."""
        return getattr(obj, ID_FIELD)


def build_document_mapper(converters: Mapping[type, ScalarConverter], map_key_dot_replacement: str = "#") -> DocumentMapper:
    """Create and finalize a document mapper."""
    return DocumentMapper(converters, map_key_dot_replacement).finalize()
