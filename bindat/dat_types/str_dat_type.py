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


class StrDatType(DatType[str]):
    """ Represents builtin `str` values, the payload must be valid utf-8.
    """

    __slots__ = ()
    _default_shape = str

    @override
    @classmethod
    def _from_type(cls, type_: type[str], /, *, type_map: DatType.TypeMap) -> Self:
        if type_ is not str:
            raise TypeError('expected str type')
        return cls()

    @override
    def _accepts(self, value: Any, /) -> bool:
        return isinstance(value, str)

    @override
    def _encode(self, encoder: Encoder, value: str, /) -> None:
        encoder.write_text(value)

    @override
    def _is_empty(self, value: str, /) -> bool:
        return len(value) == 0

    @override
    def zero(self) -> str:
        return ''

    @override
    def from_text(self, source: Scalar, /) -> str:
        try:
            return source.value.decode('utf-8')
        except UnicodeDecodeError:
            raise self.mismatch(source.describe(), 'invalid utf-8')
