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

from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import override

from bindat.dat_types.dat_type import DatType

if TYPE_CHECKING:
    from bindat.decoder import Decoder
    from bindat.encoder import Encoder


class OpaqueDatType(DatType[Any]):
    """ Stands for a record field whose annotation has no converter, like a callable or a lock.

    Such a field is always empty, so it's never written, and the only record it accepts is Nil, which leaves it
    unchanged. It is never found through a type map.
    """

    __slots__ = ()
    _default_shape = object

    @classmethod
    def for_field(cls, annotation: Any) -> OpaqueDatType:
        dat_type = cls()
        dat_type._shape = annotation
        return dat_type

    @override
    def _accepts(self, value: Any, /) -> bool:
        return True

    @override
    def _encode(self, encoder: Encoder, value: Any, /) -> None:
        encoder.encode(value)

    @override
    def _is_empty(self, value: Any, /) -> bool:
        return True

    @override
    def zero(self) -> Any:
        return None

    @override
    def from_nil(self, decoder: Decoder, prior: Optional[Any], /) -> Any:
        return prior
