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

import inspect
from types import UnionType
from typing import Any


def resolve_newtype(type_: Any, /) -> Any:
    """ Follow a chain of NewType declarations down to the first real type.

    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> M = NewType('M', N)
    >>> resolve_newtype(M)
    <class 'int'>
    >>> resolve_newtype(str)
    <class 'str'>
    """
    while (super_type := getattr(type_, '__supertype__', None)) is not None:
        type_ = super_type
    return type_


def is_subclass(cls: Any, class_or_tuple: type | tuple[type, ...] | UnionType, /) -> bool:
    """ Like issubclass() but accepts NewType classes as arg 1 and returns False for anything that isn't a class.

    >>> is_subclass(bool, int)
    True
    >>> is_subclass(str, int)
    False
    >>> from typing import NewType
    >>> N = NewType('N', int)
    >>> is_subclass(N, int)
    True
    >>> is_subclass(list[int], list)
    False
    >>> is_subclass(42, int)
    False
    """
    cls = resolve_newtype(cls)
    return isinstance(cls, type) and not hasattr(cls, '__origin__') and issubclass(cls, class_or_tuple)


def is_interface(type_: Any, /) -> bool:
    """ Whether the type is a contract rather than a concrete shape: a Protocol or an abstract class.

    >>> from typing import SupportsInt
    >>> from collections.abc import Sized
    >>> is_interface(SupportsInt), is_interface(Sized), is_interface(int)
    (True, True, False)
    """
    if not isinstance(type_, type):
        return False
    return bool(getattr(type_, '_is_protocol', False)) or inspect.isabstract(type_)
