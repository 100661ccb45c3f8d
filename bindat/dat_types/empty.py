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

import dataclasses
from collections.abc import Mapping, Sequence, Set
from typing import Any

from bindat.types import BytesMarshaler
from bindat.value import VALUE_TYPES, Nil


def is_empty_value(value: Any) -> bool:
    """ The emptiness predicate for a value whose type isn't the annotated one, decided from the value alone.

    >>> is_empty_value(None), is_empty_value(False), is_empty_value(0.0), is_empty_value(''), is_empty_value({})
    (True, True, True, True, True)
    >>> is_empty_value(True), is_empty_value(-1), is_empty_value('a'), is_empty_value([None])
    (False, False, False, False)
    """
    match value:
        case None:
            return True
        case bool() | int() | float():
            return value == 0
        case str() | bytes() | bytearray() | memoryview():
            return len(value) == 0
        case _ if isinstance(value, VALUE_TYPES):
            return isinstance(value, Nil)
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            from bindat.dat_types import make_dat_type
            return make_dat_type(type(value)).is_empty(value)
        case BytesMarshaler():
            return False
        case Mapping() | Set() | Sequence():
            return len(value) == 0
        case _:
            # XXX: anything else is written as Nil
            return True
