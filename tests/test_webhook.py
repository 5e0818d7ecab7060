from unittest.mock import AsyncMock, Mock, patch
from xml.etree import ElementTree

from sqlalchemy.exc import OperationalError

from autoresponder.services.llm.base import CompletionResponse
from autoresponder.services.reply_service import ACCOUNT_NOT_FOUND_RESPONSE, GENERIC_ERROR_RESPONSE
from autoresponder.services.response_service import upsert
from autoresponder.services.router_service import AI_FALLBACK_NOTICE, DEFAULT_GREETING


def _message_text(response) -> str:
    root = ElementTree.fromstring(response.content)
    assert root.tag == "Response"
    message = root.find("Message")
    assert message is not None
    return message.text or ""


def _post(client, body=None, sender=None):
    data = {}
    if body is not None:
        data["Body"] = body
    if sender is not None:
        data["From"] = sender
    return client.post("/webhook", data=data)


class TestWebhookRouting:
    def test_menu_option_reply(self, client, db_session, make_account):
        account = make_account(phone="+15550001")
        upsert(db_session, account.id, "option1", "Our products: https://shop.example.com")

        response = _post(client, " 1 ", "whatsapp:+15550001")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert _message_text(response) == "Our products: https://shop.example.com"

    def test_greeting_for_unmatched_text(self, client, db_session, make_account):
        account = make_account(phone="+15550001")
        upsert(db_session, account.id, "greeting", "Hi <friend> & welcome")

        response = _post(client, "hola", "+15550001")

        assert _message_text(response) == "Hi <friend> & welcome"

    def test_missing_body_uses_default_greeting(self, client, make_account):
        make_account(phone="+15550001")

        response = _post(client, sender="whatsapp:+15550001")

        assert response.status_code == 200
        assert _message_text(response) == DEFAULT_GREETING

    @patch("autoresponder.routers.webhook.get_completion_provider")
    def test_pro_account_gets_ai_reply(self, mock_get_provider, client, db_session, make_account):
        provider = Mock()
        provider.complete = AsyncMock(return_value=CompletionResponse(content=" We ship worldwide ", model="m"))
        mock_get_provider.return_value = provider
        account = make_account(phone="+15550001", plan="pro")
        upsert(db_session, account.id, "custom_prompt", "You are a shop assistant")

        response = _post(client, "Do you ship?", "whatsapp:+15550001")

        assert _message_text(response) == "We ship worldwide"
        provider.complete.assert_awaited_once_with("You are a shop assistant", "do you ship?")

    @patch("autoresponder.routers.webhook.get_completion_provider")
    def test_ai_failure_still_replies_200(self, mock_get_provider, client, db_session, make_account):
        provider = Mock()
        provider.complete = AsyncMock(side_effect=RuntimeError("upstream 500"))
        mock_get_provider.return_value = provider
        account = make_account(phone="+15550001", plan="premium")
        upsert(db_session, account.id, "custom_prompt", "Be nice")

        response = _post(client, "hi", "whatsapp:+15550001")

        assert response.status_code == 200
        assert _message_text(response) == AI_FALLBACK_NOTICE


class TestWebhookDegradedPaths:
    def test_unknown_sender_gets_generic_reply(self, client):
        response = _post(client, "1", "whatsapp:+19999999")

        assert response.status_code == 200
        assert _message_text(response) == ACCOUNT_NOT_FOUND_RESPONSE

    def test_empty_form_gets_generic_reply(self, client):
        response = client.post("/webhook")

        assert response.status_code == 200
        assert _message_text(response) == ACCOUNT_NOT_FOUND_RESPONSE

    @patch("autoresponder.routers.webhook.get_all")
    def test_store_failure_gets_generic_reply(self, mock_get_all, client, make_account):
        make_account(phone="+15550001")
        mock_get_all.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

        response = _post(client, "1", "+15550001")

        assert response.status_code == 200
        assert _message_text(response) == GENERIC_ERROR_RESPONSE

    @patch("autoresponder.routers.webhook.route")
    def test_routing_crash_gets_generic_reply(self, mock_route, client, make_account):
        make_account(phone="+15550001")
        mock_route.side_effect = RuntimeError("unexpected")

        response = _post(client, "1", "+15550001")

        assert response.status_code == 200
        assert _message_text(response) == GENERIC_ERROR_RESPONSE

    def test_get_reports_endpoint_alive(self, client):
        response = client.get("/webhook")
        assert response.status_code == 200
        assert response.json()["ok"] is True
