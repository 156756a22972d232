# backend/test_portal_client.py
"""
PortalClient: local validation happens before any connection is opened;
network failures are reported, not raised.
"""

import asyncio

import aiohttp
import pytest

from core.errors import ApplicationValidationError
from utils import portal_client
from utils.portal_client import PortalClient


class _NoNetwork:
    def __init__(self, *args, **kwargs):
        raise AssertionError("network must not be used")


class _FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self._body = body

    async def json(self, content_type=None):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class _FakeSession:
    calls = []
    response = _FakeResponse(200, {"success": True, "message": "ok"})
    error = None

    def __init__(self, *args, **kwargs):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def request(self, method, url, **kwargs):
        if self.error is not None:
            raise self.error
        type(self).calls.append((method, url, kwargs))
        return self.response


@pytest.fixture
def no_network(monkeypatch):
    monkeypatch.setattr(portal_client.aiohttp, "ClientSession", _NoNetwork)


@pytest.fixture
def fake_session(monkeypatch):
    class Session(_FakeSession):
        calls = []
    monkeypatch.setattr(portal_client.aiohttp, "ClientSession", Session)
    return Session


class TestClientSideValidation:

    @pytest.mark.parametrize("remark", [None, "", "   "])
    def test_reject_without_remark(self, no_network, remark):
        client = PortalClient("http://portal.test")
        with pytest.raises(ApplicationValidationError):
            asyncio.run(client.update_application_status("a1", "rejected", remark))

    def test_gazetted_without_hindi_uploads(self, no_network, application_fields, documents):
        client = PortalClient("http://portal.test")
        fields = application_fields(applicantType="gazetted", ruidNo="RU42")
        with pytest.raises(ApplicationValidationError) as exc:
            asyncio.run(client.submit_application(fields, documents()))
        assert len(exc.value.errors) == 2

    def test_malformed_mobile(self, no_network, application_fields, documents):
        client = PortalClient("http://portal.test")
        with pytest.raises(ApplicationValidationError):
            asyncio.run(client.submit_application(application_fields(mobileNumber="1234"), documents()))


class TestRequests:

    def test_rejection_is_sent(self, fake_session):
        result = asyncio.run(PortalClient("http://portal.test/").update_application_status(
            "a1", "rejected", "incomplete documents"
        ))
        assert result == {"success": True, "message": "ok"}
        method, url, kwargs = fake_session.calls[0]
        assert method == "POST"
        assert url == "http://portal.test/api/employees/a1/status"
        assert kwargs["json"] == {"status": "rejected", "remark": "incomplete documents"}

    def test_submission_is_sent_as_multipart(self, fake_session, application_fields, documents):
        asyncio.run(PortalClient("http://portal.test").submit_application(application_fields(), documents()))
        method, url, kwargs = fake_session.calls[0]
        assert (method, url) == ("POST", "http://portal.test/api/employees")
        assert isinstance(kwargs["data"], aiohttp.FormData)

    def test_status_lookup_params(self, fake_session):
        asyncio.run(PortalClient("http://portal.test").get_application_status("a1", "12-03-1985"))
        assert fake_session.calls[0][2]["params"] == {"id": "a1", "dob": "12-03-1985"}

    def test_http_error_is_reported(self, fake_session):
        fake_session.response = _FakeResponse(409, {"detail": "Cannot change status from approved to rejected"})
        result = asyncio.run(PortalClient("http://portal.test").update_application_status("a1", "approved"))
        assert result == {"success": False, "message": "HTTP 409: Cannot change status from approved to rejected"}

    def test_network_error_is_reported(self, fake_session):
        fake_session.error = aiohttp.ClientConnectionError("connection refused")
        result = asyncio.run(PortalClient("http://portal.test").list_employees(status="all"))
        assert result["success"] is False
        assert "connection refused" in result["message"]
