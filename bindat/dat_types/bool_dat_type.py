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

from typing import TYPE_CHECKING, Any

from typing_extensions import Self, override

from bindat.dat_types.dat_type import DatType, Scalar

if TYPE_CHECKING:
    from bindat.encoder import Encoder

_TEXT_LITERALS = {b'true': True, b'false': False}


class BoolDatType(DatType[bool]):
    """ Represents builtin `bool` values, text records are accepted when they are exactly "true" or "false".
    """

    __slots__ = ()
    _default_shape = bool

    @override
    @classmethod
    def _from_type(cls, type_: type[bool], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not bool:
            raise TypeError('expected bool type')
        return cls()

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, bool)

    @override
    def _encode(self, encoder: Encoder, value: bool, /) -> None:
        encoder.write_bool(value)

    @override
    def _is_empty(self, value: bool, /) -> bool:
        return not value

    @override
    def zero(self) -> bool:
        return False

    @override
    def from_bool(self, source: Scalar, /) -> bool:
        return source.value

    @override
    def from_text(self, source: Scalar, /) -> bool:
        if source.value not in _TEXT_LITERALS:
            raise self.mismatch(source.describe(), 'expected "true" or "false"')
        return _TEXT_LITERALS[source.value]
