import pytest

from docketcache.domain.interfaces.cache import CacheKeyError
from docketcache.infrastructure.cache.key_builder import generate_key, prefix_marker


def test_key_format():
    assert generate_key('search', {'q': 'brown', 'page': 2}) == 'search:page=2&q="brown"'

def test_key_independent_of_param_order():
    first = generate_key('search', {'q': 'brown', 'court': 'scotus', 'year': 1954})
    second = generate_key('search', {'year': 1954, 'q': 'brown', 'court': 'scotus'})
    assert first == second

@pytest.mark.parametrize("params", [None, {}])
def test_empty_params_yield_bare_prefix(params):
    assert generate_key('dashboard', params) == 'dashboard:'

def test_values_are_compact_json():
    key = generate_key('filter', {'tags': ['civil', 'appeal'], 'range': {'from': 1, 'to': 2}, 'open': True, 'judge': None})
    assert key == 'filter:judge=null&open=true&range={"from":1,"to":2}&tags=["civil","appeal"]'

def test_non_ascii_kept_verbatim():
    assert generate_key('party', {'name': 'Müller'}) == 'party:name="Müller"'

def test_string_and_number_values_differ():
    assert generate_key('case', {'id': '42'}) != generate_key('case', {'id': 42})

def test_cyclic_value_raises_key_error():
    cyclic = []
    cyclic.append(cyclic)
    with pytest.raises(CacheKeyError) as exc_info:
        generate_key('p', {'loop': cyclic})
    assert isinstance(exc_info.value.__cause__, ValueError)

def test_unserializable_value_raises_key_error():
    with pytest.raises(CacheKeyError, match="'when'"):
        generate_key('p', {'when': object()})

@pytest.mark.parametrize("value", [float('nan'), float('inf'), float('-inf'), [1, float('nan')]])
def test_non_finite_numbers_raise_key_error(value):
    with pytest.raises(CacheKeyError, match="'x'"):
        generate_key('p', {'x': value})

def test_prefix_marker():
    assert prefix_marker('search') == 'search:'
