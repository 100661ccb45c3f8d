import doctest
from importlib import import_module

import pytest
from structlog.testing import capture_logs

MODULES_WITH_DOCTESTS = [
    'bindat.batch',
    'bindat.decoder',
    'bindat.encoder',
    'bindat.exception',
    'bindat.value',
    'bindat.dat_types',
    'bindat.dat_types.any_dat_type',
    'bindat.dat_types.dat_type',
    'bindat.dat_types.dataclass_dat_type',
    'bindat.dat_types.empty',
    'bindat.dat_types.utils',
    'bindat.serialization.bytes_deserializer',
    'bindat.serialization.bytes_serializer',
    'bindat.serialization.stream_deserializer',
    'bindat.serialization.encoding.float',
    'bindat.serialization.encoding.int',
    'bindat.serialization.encoding.length',
    'bindat.serialization.encoding.tags',
    'bindat.utils.dict',
    'bindat.utils.typing',
]


@pytest.mark.parametrize('module_name', MODULES_WITH_DOCTESTS)
def test_doctests(module_name: str) -> None:
    module = import_module(module_name)
    # XXX: debug logs would otherwise be printed and compared with the expected output
    with capture_logs():
        result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
