# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any, Optional, TypeVar, get_origin, get_type_hints

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType
from bindat.dat_types.opaque_dat_type import OpaqueDatType
from bindat.dat_types.str_dat_type import StrDatType
from bindat.exception import DecodeUsageError, UnsupportedTypeError
from bindat.serialization.encoding.tags import Kind
from bindat.types import Record

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

D = TypeVar('D', bound=Record)

_KEY = StrDatType()


class DataclassDatType(DatType[D]):
    """ Represents dataclass values, written as a mapping keyed by field name.

    Fields are every entry of `dataclasses.fields()`, including private ones and those with `init=False`. Their
    converters are built on first use from `typing.get_type_hints()`, so string annotations and classes that refer to
    themselves are fine. A field whose annotation isn't supported is never written, and can only be decoded from Nil.

    Encoding leaves out empty fields, so a record holding only zero values is an empty mapping. Decoding requires every
    key to name a field, fields that aren't in the record keep their prior value. Values are built without calling
    `__init__` or `__post_init__`, so frozen dataclasses and fields with `init=False` can be decoded.

    >>> from dataclasses import dataclass
    >>> import bindat
    >>> @dataclass
    ... class Point:
    ...     x: int = 0
    ...     y: int = 0
    >>> bindat.marshal(Point()).hex(), bindat.marshal(Point(y=2)).hex()
    ('4f00', '4f015301794902')
    """

    __slots__ = ('_cls', '_type_map', '_fields')
    _default_shape = Record
    _cls: type[D]
    _type_map: DatType.TypeMap
    _fields: Optional[dict[str, DatType]]

    def __init__(self, cls: type[D], type_map: DatType.TypeMap) -> None:
        self._cls = cls
        self._type_map = type_map
        self._fields = None

    @override
    @classmethod
    def _from_type(cls, type_: type[D], /, *, type_map: DatType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not dataclasses.is_dataclass(origin_type):
            raise TypeError('expected a dataclass')
        return cls(origin_type, type_map)

    @property
    def fields(self) -> dict[str, DatType]:
        """ Converter of each field by name, in declaration order."""
        if self._fields is None:
            self._fields = self._build_fields()
        return self._fields

    def _build_fields(self) -> dict[str, DatType]:
        try:
            hints = get_type_hints(self._cls)
        except NameError as e:
            raise UnsupportedTypeError(f'cannot resolve the annotations of {self._cls.__qualname__}: {e}') from e
        fields: dict[str, DatType] = {}
        for field in dataclasses.fields(self._cls):
            annotation = hints.get(field.name, Any)
            try:
                fields[field.name] = DatType.from_type(annotation, type_map=self._type_map)
            except UnsupportedTypeError:
                fields[field.name] = OpaqueDatType.for_field(annotation)
        return fields

    def _field_values(self, value: D) -> dict[str, Any]:
        """ Current value of each field, a missing attribute counts as the field's zero."""
        return {
            name: getattr(value, name) if hasattr(value, name) else self._field_zero(name)
            for name in self.fields
        }

    def _field_zero(self, name: str) -> Any:
        field = self._cls.__dataclass_fields__[name]
        if field.default is not dataclasses.MISSING:
            return field.default
        if field.default_factory is not dataclasses.MISSING:
            return field.default_factory()
        return self.fields[name].zero()

    def _build(self, values: dict[str, Any]) -> D:
        instance = self._cls.__new__(self._cls)
        for name, value in values.items():
            object.__setattr__(instance, name, value)
        return instance

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, self._cls)

    @override
    def _encode(self, encoder: Encoder, value: D, /) -> None:
        present = [
            (name, field_value)
            for name, field_value in self._field_values(value).items()
            if not self.fields[name].is_empty(field_value)
        ]
        encoder.write_header(Kind.MAPPING, len(present))
        with encoder.nested(value):
            for name, field_value in present:
                encoder.write_text(name)
                self.fields[name].encode(encoder, field_value)

    @override
    def _is_empty(self, value: D, /) -> bool:
        return all(self.fields[name].is_empty(field_value) for name, field_value in self._field_values(value).items())

    @override
    def zero(self) -> D:
        return self._build({name: self._field_zero(name) for name in self.fields})

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[D], /) -> D:
        if prior is None:
            values = {name: self._field_zero(name) for name in self.fields}
        elif isinstance(prior, self._cls):
            values = self._field_values(prior)
        else:
            raise DecodeUsageError(f'prior must be a {self._cls.__qualname__} instance, got {type(prior).__qualname__}')
        for _ in range(count):
            name = decoder.read(_KEY)
            if name not in self.fields:
                raise self.mismatch(f'mapping[{count}]', f'no field named {name!r}')
            values[name] = decoder.read(self.fields[name], values[name])
        return self._build(values)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._cls.__qualname__})'
