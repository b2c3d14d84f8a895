import itertools
import json
import uuid
from urllib.parse import unquote

import pytest

from couchstore import CouchSource
from couchstore.exceptions import TransportError


class FakeCouch:
    """
    In-memory stand-in for the CouchDB transport

    Implements the same get/post/put/delete contract as CouchClient and
    enough of CouchDB's revision rules to exercise the datasource:
    stale revisions conflict, deleted documents leave tombstones.
    Every call is recorded in ``calls`` as (method, path, body, params).
    """

    def __init__(self):
        self.settings = None
        self.databases = dict()
        self.calls = list()
        self.closed = False
        self.down = False
        self.welcome = {'couchdb': 'Welcome', 'version': '3.3.3'}
        self.after_get = None
        self.ids = itertools.count(1)

    def bind(self, settings):
        self.settings = settings
        self.closed = False
        return self

    # Helpers for fixtures and assertions.

    def create_database(self, name):
        self.databases[name] = dict()

    def put_document(self, db, id, document):
        return json.loads(self.put('/%s/%s' % (db, id), json.dumps(document).encode()))

    def document(self, db, id):
        return json.loads(self.get('/%s/%s' % (db, id)))

    def methods(self):
        return [call[0] for call in self.calls]

    # Transport contract.

    def get(self, path='/', params=None):
        self.record('GET', path, None, params)
        response = self.handle_get(self.split(path))
        if self.after_get is not None:
            hook = self.after_get
            self.after_get = None
            hook()
        return self.respond(response)

    def post(self, path, body):
        self.record('POST', path, body, None)
        parts = self.split(path)
        db = self.databases.get(parts[0])
        if db is None:
            return self.respond(self.missing_database())

        document = json.loads(body)
        id = document.pop('_id', None) or uuid.uuid4().hex
        rev = self.next_rev(None)
        document.update({'_id': id, '_rev': rev})
        db[id] = document
        return self.respond({'ok': True, 'id': id, 'rev': rev})

    def put(self, path, body):
        self.record('PUT', path, body, None)
        parts = self.split(path)
        db = self.databases.get(parts[0])
        if db is None:
            return self.respond(self.missing_database())

        id = parts[1]
        document = json.loads(body)
        current = db.get(id)
        live = current is not None and not current.get('_deleted')

        if live and document.get('_rev') != current['_rev']:
            return self.respond(self.conflict())
        if not live and document.get('_rev') is not None:
            return self.respond(self.conflict())

        rev = self.next_rev(current)
        document.update({'_id': id, '_rev': rev})
        db[id] = document
        return self.respond({'ok': True, 'id': id, 'rev': rev})

    def delete(self, path, params=None):
        self.record('DELETE', path, None, params)
        parts = self.split(path)
        db = self.databases.get(parts[0])
        if db is None:
            return self.respond(self.missing_database())

        id = parts[1]
        current = db.get(id)
        if current is None or current.get('_deleted'):
            return self.respond({'error': 'not_found', 'reason': 'deleted' if current else 'missing'})

        rev = (params or dict()).get('rev')
        if rev != current['_rev']:
            return self.respond(self.conflict())

        rev = self.next_rev(current)
        db[id] = {'_id': id, '_rev': rev, '_deleted': True}
        return self.respond({'ok': True, 'id': id, 'rev': rev})

    def close(self):
        self.closed = True

    # Internals.

    def record(self, method, path, body, params):
        if self.down:
            raise TransportError('%s %s: connection failed' % (method, path), status_code=503)
        decoded = json.loads(body) if body else None
        self.calls.append((method, path, decoded, params))

    def handle_get(self, parts):
        if parts == ['']:
            return self.welcome
        if parts == ['_all_dbs']:
            return sorted(self.databases)

        db = self.databases.get(parts[0])
        if db is None:
            return self.missing_database()

        live = dict((id, doc) for id, doc in db.items() if not doc.get('_deleted'))

        if len(parts) == 1 or parts[1] == '':
            return {'db_name': parts[0], 'doc_count': len(live)}

        if parts[1] == '_all_docs':
            rows = list()
            for id in sorted(live):
                rows.append({'id': id, 'key': id, 'value': {'rev': live[id]['_rev']}})
            return {'total_rows': len(rows), 'offset': 0, 'rows': rows}

        document = db.get(parts[1])
        if document is None:
            return {'error': 'not_found', 'reason': 'missing'}
        if document.get('_deleted'):
            return {'error': 'not_found', 'reason': 'deleted'}
        return dict(document)

    def next_rev(self, current):
        generation = 1
        if current is not None:
            generation = int(current['_rev'].split('-')[0]) + 1
        return '%d-%08x' % (generation, next(self.ids))

    def split(self, path):
        return [unquote(part) for part in path.strip('/').split('/', 1)]

    def missing_database(self):
        return {'error': 'not_found', 'reason': 'Database does not exist.'}

    def conflict(self):
        return {'error': 'conflict', 'reason': 'Document update conflict.'}

    def respond(self, document):
        return json.dumps(document).encode('utf-8')


@pytest.fixture
def couch():
    couch = FakeCouch()
    couch.create_database('posts')
    return couch


@pytest.fixture
def source(couch):
    source = CouchSource(client_factory=couch.bind)
    couch.calls = list()
    return source
