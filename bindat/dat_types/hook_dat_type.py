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
from typing import TYPE_CHECKING, Any, Optional, TypeVar, get_origin

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar
from bindat.dat_types.dataclass_dat_type import DataclassDatType
from bindat.types import BytesMarshaler, BytesUnmarshaler

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder

H = TypeVar('H', bound=BytesUnmarshaler)


class BytesHookDatType(DatType[H]):
    """ Represents classes that rebuild themselves with a `from_bytes` classmethod.

    A bytes record is handed to `from_bytes` and whatever it raises propagates unchanged. Values are written with
    `bytes(value)` when the class defines `__bytes__`. A hook class that is also a dataclass is written field by
    field when it can't make bytes, and accepts mapping records like any dataclass.
    """

    __slots__ = ('_cls', '_record')
    _default_shape = BytesUnmarshaler
    _cls: type[H]
    _record: Optional[DataclassDatType]

    def __init__(self, cls: type[H], record: Optional[DataclassDatType]) -> None:
        self._cls = cls
        self._record = record

    @override
    @classmethod
    def _from_type(cls, type_: type[H], /, *, type_map: DatType.TypeMap) -> Self:
        origin_type = get_origin(type_) or type_
        if not isinstance(origin_type, type) or not callable(getattr(origin_type, 'from_bytes', None)):
            raise TypeError('expected a class with a from_bytes classmethod')
        record = None
        if dataclasses.is_dataclass(origin_type):
            record = DataclassDatType(origin_type, type_map)
            record._shape = type_
        return cls(origin_type, record)

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, self._cls)

    @override
    def _encode(self, encoder: Encoder, value: H, /) -> None:
        if isinstance(value, BytesMarshaler):
            encoder.write_bytes(bytes(value))
        elif self._record is not None:
            self._record.encode(encoder, value)
        else:
            encoder.encode(value)

    @override
    def _is_empty(self, value: H, /) -> bool:
        if self._record is not None:
            return self._record.is_empty(value)
        return False

    @override
    def zero(self) -> Optional[H]:  # type: ignore[override]
        return None

    @override
    def from_bytes(self, source: Scalar, /) -> H:
        return self._cls.from_bytes(bytes(source.value))

    @override
    def from_mapping(self, decoder: Decoder, count: int, prior: Optional[H], /) -> H:
        if self._record is None:
            return super().from_mapping(decoder, count, prior)
        return self._record.from_mapping(decoder, count, prior)

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self._cls.__qualname__})'
