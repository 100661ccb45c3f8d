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

"""
This module holds the leaf encodings of the wire format: tag bytes, fixed-width numbers and length headers.

Leaf means these never recurse. Walking sequences, mappings and records is done by `bindat.encoder` and
`bindat.decoder`, which use the functions here for every byte they write or read.

The general organization is that each submodule `x` deals with a single concern and looks like this:

    def encode_x(serializer: Serializer, value: ValueType, ...config params...) -> None:
        ...

    def decode_x(deserializer: Deserializer, ...config params...) -> ValueType:
        ...

Width selection (picking the smallest tier that holds a value) lives next to the encoder of each concern, so the
"tier is a function of magnitude" rule is always applied in one place.
"""
