"""Tests for the connect / disconnect facade."""

from __future__ import annotations

import json

import httpx
import pytest

from wildfyre import api
from wildfyre.auth import TokenStore
from wildfyre.exceptions import CantConnectError, InvalidCredentialsError, IssueInTransferError
from wildfyre.models import ClientConfig


def _auth_transport(status_code: int = 200, **response_kwargs) -> tuple[httpx.MockTransport, list]:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, **response_kwargs)

    return httpx.MockTransport(handler), seen


class TestRequestToken:
    def test_posts_credentials(self, testing_config: ClientConfig) -> None:
        transport, seen = _auth_transport(json={"token": "5b2e"})

        token = api.request_token("alice", "secret", config=testing_config, transport=transport)

        assert token == "5b2e"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/account/auth/"
        assert json.loads(seen[0].content) == {"username": "alice", "password": "secret"}
        assert "Authorization" not in seen[0].headers

    def test_refused_credentials(self, testing_config: ClientConfig) -> None:
        transport, _ = _auth_transport(400, json={"non_field_errors": ["Unable to log in."]})

        with pytest.raises(InvalidCredentialsError) as exc_info:
            api.request_token("alice", "wrong", config=testing_config, transport=transport)

        assert exc_info.value.issue.status_code == 400
        assert exc_info.value.issue.json() == {"non_field_errors": ["Unable to log in."]}
        assert exc_info.value.__cause__ is exc_info.value.issue

    @pytest.mark.parametrize("status_code", [401, 403])
    def test_unauthorized_is_a_credentials_problem(
        self, testing_config: ClientConfig, status_code: int
    ) -> None:
        transport, _ = _auth_transport(status_code, json={"detail": "nope"})
        with pytest.raises(InvalidCredentialsError):
            api.request_token("alice", "wrong", config=testing_config, transport=transport)

    @pytest.mark.parametrize("status_code", [404, 500, 503])
    def test_other_rejections_are_not_credentials_problems(
        self, testing_config: ClientConfig, status_code: int
    ) -> None:
        transport, _ = _auth_transport(status_code, text="down for maintenance")

        with pytest.raises(IssueInTransferError) as exc_info:
            api.request_token("alice", "secret", config=testing_config, transport=transport)

        assert not isinstance(exc_info.value, InvalidCredentialsError)
        assert exc_info.value.status_code == status_code
        assert exc_info.value.error_body == b"down for maintenance"

    def test_answer_without_token(self, testing_config: ClientConfig) -> None:
        transport, _ = _auth_transport(json={"detail": "?"})
        with pytest.raises(IssueInTransferError, match="did not answer with a token"):
            api.request_token("alice", "secret", config=testing_config, transport=transport)

    def test_answer_not_json_is_not_a_credentials_problem(self, testing_config: ClientConfig) -> None:
        transport, _ = _auth_transport(text="<html>maintenance</html>")
        with pytest.raises(IssueInTransferError, match="maintenance"):
            api.request_token("alice", "secret", config=testing_config, transport=transport)

    def test_server_down(self, testing_config: ClientConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CantConnectError):
            api.request_token(
                "alice", "secret", config=testing_config, transport=httpx.MockTransport(handler)
            )


class TestConnection:
    def test_connect_stores_token(self, testing_config: ClientConfig, token_store: TokenStore) -> None:
        transport, _ = _auth_transport(json={"token": "5b2e"})

        assert api.connect(
            "alice", "secret", config=testing_config, transport=transport, store=token_store
        ) == "5b2e"
        assert token_store.token() == "5b2e"
        assert api.is_connected(store=token_store)

    def test_failed_connect_leaves_store_untouched(
        self, testing_config: ClientConfig, token_store: TokenStore
    ) -> None:
        transport, _ = _auth_transport(400, json={})
        with pytest.raises(InvalidCredentialsError):
            api.connect("alice", "x", config=testing_config, transport=transport, store=token_store)
        assert not api.is_connected(store=token_store)

    def test_connect_with_token(self, token_store: TokenStore) -> None:
        api.connect_with_token("abc", store=token_store)
        assert token_store.token() == "abc"

    @pytest.mark.parametrize("token", [None, ""])
    def test_connect_with_missing_token(self, token_store: TokenStore, token) -> None:
        with pytest.raises(ValueError, match="Cannot connect with the token"):
            api.connect_with_token(token, store=token_store)

    def test_disconnect(self, token_store: TokenStore) -> None:
        api.connect_with_token("abc", store=token_store)
        api.disconnect(store=token_store)
        assert not api.is_connected(store=token_store)
        assert token_store.token() is None

    def test_default_store(self) -> None:
        try:
            api.connect_with_token("global")
            assert api.is_connected()
        finally:
            api.disconnect()
        assert not api.is_connected()
