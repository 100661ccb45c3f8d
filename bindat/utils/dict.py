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

from copy import deepcopy
from typing import Any, TypeVar

K = TypeVar('K')


def deep_merge(base: dict[K, Any], override: dict[K, Any]) -> dict[K, Any]:
    """
    Merge `override` into a copy of `base`, nested dicts are merged key by key and anything else is replaced.

    Neither input is modified. A circular reference in both dicts raises RecursionError.

    >>> base = dict(MAX_DEPTH=512, limits=dict(length=10, depth=2))
    >>> result = deep_merge(base, dict(limits=dict(depth=3), MAX_DEPTH=8))
    >>> result == dict(MAX_DEPTH=8, limits=dict(length=10, depth=3))
    True
    >>> base == dict(MAX_DEPTH=512, limits=dict(length=10, depth=2))
    True
    """
    merged = deepcopy(base)
    _merge_into(merged, override)
    return merged


def _merge_into(target: dict[K, Any], source: dict[K, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            target[key] = deepcopy(value)
