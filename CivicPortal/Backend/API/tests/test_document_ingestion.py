"""Tests for reference document ingestion (POST /agency/documents)."""

from unittest.mock import MagicMock, patch

import requests

from models import PdfContent
from services import document_ingestion

DIRECTORY_TEXT = (
    "NYC 311 Service Directory\n"
    "See HYPERLINK \"https://nyc.gov/311\" for details.\n"
    "• Noise - Residential https://portal.311.nyc.gov/article/?kanumber=KA-01010 Loud music or parties\n"
    "• Street Light Condition https://portal.311.nyc.gov/article/?kanumber=KA-01073 Lamp out\n"
    "Visit https://nyc.gov/311. for more.\n"
    "ok\n"
)


def _download(content, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.content = content
    return response


class TestExtraction:
    def test_extract_links(self):
        links = document_ingestion.extract_links(DIRECTORY_TEXT)

        assert links['complaints'] == {
            'Noise - Residential': 'https://portal.311.nyc.gov/article/?kanumber=KA-01010',
            'Street Light Condition': 'https://portal.311.nyc.gov/article/?kanumber=KA-01073',
        }
        # trailing punctuation stripped and duplicates collapsed
        assert links['urls'].count('https://nyc.gov/311') == 1

    def test_substantial_lines_drop_short_lines(self):
        lines = document_ingestion.substantial_lines(DIRECTORY_TEXT)
        assert 'ok' not in lines
        assert lines[0] == 'NYC 311 Service Directory'

    def test_extraction_quality(self):
        assert document_ingestion.extraction_quality('Plain readable text') == 'good'
        assert document_ingestion.extraction_quality('\x00\x01\x02\x03abc') == 'poor'


class TestIngestRoute:
    def test_ingest_replaces_same_document_type(self, client, main_headers):
        with patch('services.document_ingestion.requests.get',
                   return_value=_download(DIRECTORY_TEXT.encode())) as get:
            first = client.post('/agency/documents', headers=main_headers,
                                json={'fileUrl': 'https://files.example.org/311-directory.pdf'})
            second = client.post('/agency/documents', headers=main_headers,
                                 json={'fileUrl': 'https://files.example.org/311-directory.pdf'})

        assert first.status_code == 200
        body = second.get_json()
        assert body['file_name'] == '311-directory.pdf'
        assert body['document_type'] == 'agency_directory'
        assert body['complaint_links_found'] == 2
        assert body['extraction_quality'] == 'good'
        assert PdfContent.query.count() == 1
        assert get.call_args.kwargs['timeout'] == document_ingestion.DOWNLOAD_TIMEOUT_SECONDS

    def test_missing_file_url(self, client, main_headers):
        response = client.post('/agency/documents', headers=main_headers, json={})
        assert response.status_code == 400

    def test_download_failure(self, client, main_headers):
        with patch('services.document_ingestion.requests.get', return_value=_download(b'', status_code=404)):
            response = client.post('/agency/documents', headers=main_headers,
                                   json={'fileUrl': 'https://files.example.org/missing.pdf'})

        assert response.status_code == 500
        assert response.get_json()['error'] == 'Failed to download document'

    def test_connection_error(self, client, main_headers):
        with patch('services.document_ingestion.requests.get',
                   side_effect=requests.exceptions.ConnectionError('refused')):
            response = client.post('/agency/documents', headers=main_headers,
                                   json={'fileUrl': 'https://files.example.org/a.pdf'})

        assert response.status_code == 500
        assert PdfContent.query.count() == 0

    def test_requires_main_admin(self, client, sub_headers):
        response = client.post('/agency/documents', headers=sub_headers,
                               json={'fileUrl': 'https://files.example.org/a.pdf'})
        assert response.status_code == 403
