import io

import pytest

pytest.importorskip("flask")

from server import app  # noqa: E402
from wasm_sourcemap_py.dwarf.structures import DW_LANG_C11  # noqa: E402

from wasm_fixtures import (  # noqa: E402
    UnitSpec, advance_pc, end_sequence, module_with_debug_info, module_with_debug_sections, row,
    zero_line_range_sections
)


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def _module() -> tuple:
    program = row(0x3, 4, 1) + advance_pc(2) + end_sequence()
    return module_with_debug_info([UnitSpec("main.c", DW_LANG_C11, "/app", [], [("main.c", 0)], program)])


def test_health(client) -> None:
    response = client.get('/api/health')
    assert response.status_code == 200
    assert response.get_json()['status'] == 'ok'


def test_sourcemap_from_multipart_upload(client) -> None:
    data, code_offset = _module()

    response = client.post(
        '/api/sourcemap',
        data={'file': (io.BytesIO(data), 'main.wasm')},
        content_type='multipart/form-data',
    )

    assert response.status_code == 200
    assert response.get_json() == {
        'files': [{'file': '/app/main.c', 'language': DW_LANG_C11, 'lines': [[code_offset + 3, 3, 0]]}]
    }


def test_sourcemap_from_raw_body_with_format(client) -> None:
    data, code_offset = _module()

    response = client.post('/api/sourcemap?format=compact', data=data, content_type='application/wasm')

    assert response.status_code == 200
    assert response.get_json()['locations'][0] == [code_offset + 3, 0, 3, 0]


def test_download_sets_attachment_name(client) -> None:
    data, _ = _module()

    response = client.post(
        '/api/sourcemap?download=1',
        data={'file': (io.BytesIO(data), '../my module.wasm')},
        content_type='multipart/form-data',
    )

    assert response.status_code == 200
    assert response.headers['Content-Disposition'] == 'attachment; filename=my_module.wasm.map.json'


def test_rejects_non_wasm_upload(client) -> None:
    response = client.post('/api/sourcemap', data=b'\x7fELF....', content_type='application/octet-stream')
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Not a WebAssembly module'}


def test_reports_extraction_errors(client) -> None:
    response = client.post('/api/sourcemap', data=b'\0asm\x01\x00\x00\x00', content_type='application/wasm')
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Missing code section.'}


def test_reports_corrupt_debug_info_as_json(client) -> None:
    data, _ = module_with_debug_sections(zero_line_range_sections())

    response = client.post('/api/sourcemap', data=data, content_type='application/wasm')

    assert response.status_code == 400
    assert response.get_json()['error'].startswith('Failed to decode line program')


def test_rejects_unknown_format(client) -> None:
    data, _ = _module()
    response = client.post('/api/sourcemap?format=xml', data=data, content_type='application/wasm')
    assert response.status_code == 400
    assert 'xml' in response.get_json()['error']


def test_empty_request(client) -> None:
    response = client.post('/api/sourcemap')
    assert response.status_code == 400
    assert response.get_json() == {'error': 'No module uploaded'}


def test_unknown_route_is_json(client) -> None:
    response = client.get('/api/nope')
    assert response.status_code == 404
    assert 'error' in response.get_json()
