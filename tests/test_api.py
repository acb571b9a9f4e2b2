from __future__ import annotations


def _create(client, **fields):
    resp = client.post('/api/employees', json=fields)
    assert resp.status_code == 201
    return resp.get_json()['id']


def test_list_empty(client):
    resp = client.get('/api/employees')

    assert resp.status_code == 200
    assert resp.get_json() == []


def test_create_and_get(client):
    new_id = _create(client, nip='111', name='A')

    resp = client.get(f'/api/employees/{new_id}')

    assert resp.status_code == 200
    data = resp.get_json()
    assert data['id'] == new_id
    assert data['nip'] == '111'
    assert data['status'] == 'ASN'
    assert data['position'] == ''
    assert data['ktp_path'] is None


def test_create_missing_required_fields(client):
    resp = client.post('/api/employees', json={'nip': '111'})

    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'NIP dan Nama wajib diisi'}


def test_create_without_json_body(client):
    resp = client.post('/api/employees', data='bukan json', content_type='text/plain')

    assert resp.status_code == 400


def test_create_duplicate_nip(client):
    _create(client, nip='111', name='A')

    resp = client.post('/api/employees', json={'nip': '111', 'name': 'B'})

    assert resp.status_code == 400
    assert '111' in resp.get_json()['error']
    assert len(client.get('/api/employees').get_json()) == 1


def test_get_unknown_returns_404(client):
    resp = client.get('/api/employees/99')

    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Employee not found'}


def test_update_overwrites_record(client):
    new_id = _create(client, nip='111', name='A', position='Analis', unit='Sekretariat')

    resp = client.put(f'/api/employees/{new_id}', json={'nip': '111', 'name': 'A', 'status': 'Aktif'})

    assert resp.status_code == 200
    assert resp.get_json() == {'success': True}
    data = client.get(f'/api/employees/{new_id}').get_json()
    assert data['status'] == 'Aktif'
    assert data['position'] == ''
    assert data['unit'] == ''


def test_update_unknown_returns_404(client):
    resp = client.put('/api/employees/99', json={'nip': '111', 'name': 'A'})

    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Pegawai tidak ditemukan'}


def test_update_missing_required_fields(client):
    new_id = _create(client, nip='111', name='A')

    resp = client.put(f'/api/employees/{new_id}', json={'name': 'A'})

    assert resp.status_code == 400


def test_update_duplicate_nip(client):
    _create(client, nip='111', name='A')
    second = _create(client, nip='222', name='B')

    resp = client.put(f'/api/employees/{second}', json={'nip': '111', 'name': 'B'})

    assert resp.status_code == 400
    assert client.get(f'/api/employees/{second}').get_json()['nip'] == '222'


def test_delete_is_idempotent(client):
    new_id = _create(client, nip='111', name='A')

    first = client.delete(f'/api/employees/{new_id}')
    second = client.delete(f'/api/employees/{new_id}')

    assert first.status_code == 200
    assert first.get_json() == {'success': True}
    assert second.status_code == 200
    assert client.get(f'/api/employees/{new_id}').status_code == 404


def test_list_sorted_and_filtered(client):
    _create(client, nip='3', name='Citra', unit='Sekretariat')
    _create(client, nip='1', name='Agus', unit='Bidang Ideologi')
    _create(client, nip='2', name='Budi', unit='Sekretariat')

    names = [row['name'] for row in client.get('/api/employees').get_json()]
    filtered = [row['name'] for row in client.get('/api/employees?unit=Sekretariat').get_json()]
    searched = [row['name'] for row in client.get('/api/employees?search=bud').get_json()]

    assert names == ['Agus', 'Budi', 'Citra']
    assert filtered == ['Budi', 'Citra']
    assert searched == ['Budi']


def test_stats(client):
    _create(client, nip='1', name='A', unit='Sekretariat', rank='Penata (III/c)')
    _create(client, nip='2', name='B', unit='Sekretariat', rank='Pembina (IV/a)')
    _create(client, nip='3', name='C', unit='Pimpinan', rank='Penata (III/c)')

    data = client.get('/api/stats').get_json()

    assert data['total'] == 3
    assert sorted(data['unitStats'], key=lambda r: r['name']) == [
        {'name': 'Pimpinan', 'value': 1},
        {'name': 'Sekretariat', 'value': 2},
    ]
    assert sum(row['value'] for row in data['rankStats']) == 3


def test_units_and_status_options(client):
    _create(client, nip='1', name='A', unit='Sekretariat')
    _create(client, nip='2', name='B', unit='Bidang Politik')

    assert client.get('/api/units').get_json() == ['Bidang Politik', 'Sekretariat']
    assert client.get('/api/status-options').get_json() == [
        'ASN', 'Calon PNS', 'P3K Penuh Waktu', 'P3K Paruh Waktu', 'Aktif',
    ]


def test_unknown_api_route_returns_json_404(client):
    resp = client.get('/api/tidak-ada')

    assert resp.status_code == 404
    assert resp.get_json() == {'error': 'Not found'}


def test_id_outside_integer_range(client):
    huge_id = 10 ** 20

    assert client.get(f'/api/employees/{huge_id}').status_code == 404
    assert client.put(f'/api/employees/{huge_id}', json={'nip': '1', 'name': 'A'}).status_code == 404
    resp = client.delete(f'/api/employees/{huge_id}')
    assert resp.status_code == 200
    assert resp.get_json() == {'success': True}


def test_search_with_underscore_matches_nothing_extra(client):
    _create(client, nip='1', name='Agus')

    assert client.get('/api/employees?search=_').get_json() == []
