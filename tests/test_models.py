import pytest

from couchstore import Result, StoreFailure, TransportFailure, Model
from couchstore.exceptions import StoreError, TransportError


def test_success():

    result = Result.from_payload({'ok': True, 'id': 'k', 'rev': '1-a'})

    assert result.succeeded
    assert result
    assert result.failure is None
    assert result.id == 'k'
    assert result.rev == '1-a'
    assert 'ok' in result
    assert result.raise_for_failure() is result


def test_document_accessors():

    result = Result.from_payload({'_id': 'k', '_rev': '2-b', 'title': 'a post'})

    assert result.id == 'k'
    assert result.rev == '2-b'
    assert result['title'] == 'a post'
    assert result.to_dict() == {'_id': 'k', '_rev': '2-b', 'title': 'a post'}


def test_store_failure():

    result = Result.from_payload({'error': 'not_found', 'reason': 'deleted'})

    assert not result
    assert result.store_failed
    assert not result.transport_failed
    assert result.failure == StoreFailure('not_found', 'deleted')
    assert result.error == 'not_found'
    assert result.reason == 'deleted'
    assert result['reason'] == 'deleted'

    with pytest.raises(StoreError) as raised:
        result.raise_for_failure()

    assert raised.value.reason == 'deleted'


def test_transport_failure():

    result = Result.from_payload(None)

    assert result.transport_failed
    assert isinstance(result.failure, TransportFailure)
    assert result.error is None
    assert result.get('error') is None
    assert 'error' not in result
    assert result.to_dict() == {}

    with pytest.raises(KeyError):
        result['ok']

    with pytest.raises(TransportError):
        result.raise_for_failure()


def test_list_payload():

    result = Result.from_payload(['posts', 'users'])

    assert result.succeeded
    assert result.payload == ['posts', 'users']
    assert result.get('rows') is None
    assert result.rows == []


def test_model():

    post = Model('posts', data={'title': 'a post'})
    assert post.table_prefix == ''
    assert post.id is None
    assert 'posts' in repr(post)
