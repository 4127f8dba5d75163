"""
Integration Tests for the scoring functions
"""
import pytest
from httpx import AsyncClient


class TestGenerateTestCases:

    @pytest.mark.asyncio
    async def test_success_envelope(self, client: AsyncClient, auth_headers: dict, project: dict):
        """Test generated rows come back wrapped in success/data"""
        response = await client.post('/api/v1/functions/generate-test-cases', json={
            'projectId': project['id'],
            'projectName': project['name'],
            'moduleName': 'PaymentProcessor',
            'testKind': 'performance',
        }, headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body['success'] is True
        assert [tc['title'] for tc in body['data']][0] == 'Response Time Test'
        assert all(tc['status'] == 'pending' for tc in body['data'])

    @pytest.mark.asyncio
    async def test_falls_back_to_project_parameters(self, client: AsyncClient, auth_headers: dict, project: dict):
        response = await client.post('/api/v1/functions/generate-test-cases', json={
            'projectId': project['id'], 'moduleName': 'PaymentProcessor', 'testType': 'unit',
        }, headers=auth_headers)

        data = response.json()['data']
        valid = next(tc for tc in data if tc['title'] == 'Valid Input Test')
        assert valid['input'] == {'valid': True, 'data': 'amount, currency'}

    @pytest.mark.asyncio
    async def test_unknown_project(self, client: AsyncClient, auth_headers: dict):
        """Test failures are reported as 500 with an error string"""
        response = await client.post('/api/v1/functions/generate-test-cases', json={
            'projectId': '00000000-0000-0000-0000-000000000000', 'moduleName': 'M',
        }, headers=auth_headers)

        assert response.status_code == 500
        assert 'not found' in response.json()['error']

    @pytest.mark.asyncio
    async def test_foreign_project(self, client: AsyncClient, other_auth_headers: dict, project: dict):
        response = await client.post('/api/v1/functions/generate-test-cases', json={
            'projectId': project['id'], 'moduleName': 'M',
        }, headers=other_auth_headers)

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_malformed_body_uses_error_envelope(self, client: AsyncClient, auth_headers: dict):
        """Test a body failing validation is reported as {error} rather than FastAPI's detail list"""
        response = await client.post('/api/v1/functions/generate-test-cases', json={
            'projectId': 'not-a-uuid',
        }, headers=auth_headers)

        assert response.status_code == 500
        body = response.json()
        assert set(body) == {'error'}
        assert 'projectId' in body['error']
        assert 'moduleName' in body['error']


class TestAnalyzeTests:

    @pytest.mark.asyncio
    async def test_three_medium_cases(self, client: AsyncClient, auth_headers: dict, project: dict):
        """Test a small suite without high-priority cases"""
        base = f"/api/v1/projects/{project['id']}/test-cases"
        for title in ('Valid Input Test', 'Boundary Value Test', 'Invalid Input Test'):
            await client.post(base, json={'title': title}, headers=auth_headers)

        response = await client.post('/api/v1/functions/analyze-tests', json={
            'projectId': project['id'], 'testKind': 'unit',
        }, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['coverage_level'] == 69
        assert [i['type'] for i in data['insights']] == ['Coverage Gap', 'Priority Distribution']

        latest = await client.get(f"/api/v1/projects/{project['id']}/analysis/latest", headers=auth_headers)
        assert latest.json()['id'] == data['id']

    @pytest.mark.asyncio
    async def test_each_call_appends(self, client: AsyncClient, auth_headers: dict, project: dict):
        payload = {'projectId': project['id'], 'testKind': 'unit'}
        first = await client.post('/api/v1/functions/analyze-tests', json=payload, headers=auth_headers)
        second = await client.post('/api/v1/functions/analyze-tests', json=payload, headers=auth_headers)

        assert first.json()['data']['id'] != second.json()['data']['id']

    @pytest.mark.asyncio
    async def test_missing_body(self, client: AsyncClient, auth_headers: dict):
        response = await client.post('/api/v1/functions/analyze-tests', headers=auth_headers)

        assert response.status_code == 500
        assert response.json()['error']
