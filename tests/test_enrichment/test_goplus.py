"""Tests for GoPlus Security API client."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from src.enrichment.goplus.client import (
    GoPlusClient,
    _parse_bool,
    _parse_holders,
    _parse_pct,
    _parse_report,
)

TOKEN = "0xAbC0000000000000000000000000000000000001"


def _response(status_code: int, payload: dict | None = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload or {}
    return resp


class TestParsers:
    def test_parse_bool(self) -> None:
        assert _parse_bool("1") is True
        assert _parse_bool("0") is False
        assert _parse_bool(None) is None
        assert _parse_bool("") is None

    def test_parse_pct(self) -> None:
        assert _parse_pct("0.05") == pytest.approx(5.0)
        assert _parse_pct("0") == 0.0
        assert _parse_pct(None) is None
        assert _parse_pct("abc") is None

    def test_parse_holders_skips_bad_entries(self) -> None:
        holders = _parse_holders(
            [
                {"address": "0xaaa", "percent": "0.5"},
                {"percent": "0.1"},
                "garbage",
                {"address": "0xbbb", "percent": None},
            ]
        )
        assert [h.address for h in holders] == ["0xaaa", "0xbbb"]
        assert holders[0].percent == pytest.approx(50.0)
        assert holders[1].percent == 0.0

    def test_report_keyed_by_lowercase_address(self) -> None:
        data = {"code": 1, "result": {TOKEN.lower(): {"token_symbol": "PEPE"}}}
        report = _parse_report(data, TOKEN)
        assert report is not None
        assert report.token_symbol == "PEPE"
        assert report.is_honeypot is None
        assert report.holders == []

    def test_report_missing_token(self) -> None:
        assert _parse_report({"code": 1, "result": {"0xother": {}}}, TOKEN) is None
        assert _parse_report({"code": 1, "result": None}, TOKEN) is None


class TestGoPlusClient:
    @pytest.mark.asyncio
    async def test_full_report(self) -> None:
        client = GoPlusClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(
            return_value=_response(
                200,
                {
                    "code": 1,
                    "result": {
                        TOKEN.lower(): {
                            "token_name": "Pepe Token",
                            "token_symbol": "PEPE",
                            "is_honeypot": "1",
                            "buy_tax": "0.01",
                            "sell_tax": "1",
                            "holder_count": "1234",
                            "holders": [
                                {"address": "0xdead", "percent": "0.42"},
                                {"address": "0xbeef", "percent": "0.031"},
                            ],
                        }
                    },
                },
            )
        )

        report = await client.get_token_security(TOKEN)

        assert report is not None
        assert report.token_name == "Pepe Token"
        assert report.is_honeypot is True
        assert report.buy_tax == pytest.approx(1.0)
        assert report.sell_tax == pytest.approx(100.0)
        assert report.holder_count == 1234
        assert report.holders[0].percent == pytest.approx(42.0)
        url = client._client.get.call_args.args[0]
        assert url.endswith("/token_security/1")
        assert client._client.get.call_args.kwargs["params"] == {"contract_addresses": TOKEN}

    @pytest.mark.asyncio
    async def test_chain_id_in_url(self) -> None:
        client = GoPlusClient(chain_id=56, max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=_response(200, {"result": {}}))

        assert await client.get_token_security(TOKEN) is None
        assert client._client.get.call_args.args[0].endswith("/56")

    @pytest.mark.asyncio
    async def test_rate_limit_retry(self) -> None:
        client = GoPlusClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(
            side_effect=[
                _response(429),
                _response(200, {"result": {TOKEN.lower(): {"is_honeypot": "0"}}}),
            ]
        )

        with patch("src.enrichment.goplus.client.asyncio.sleep", new=AsyncMock()):
            report = await client.get_token_security(TOKEN)

        assert report is not None
        assert report.is_honeypot is False
        assert client._client.get.await_count == 2

    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        client = GoPlusClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=_response(500))

        assert await client.get_token_security(TOKEN) is None
        assert client._client.get.await_count == 1

    @pytest.mark.asyncio
    async def test_timeout_handling(self) -> None:
        client = GoPlusClient(max_rps=100.0)
        client._client = AsyncMock()
        client._client.get = AsyncMock(side_effect=httpx.TimeoutException("timeout"))

        with patch("src.enrichment.goplus.client.asyncio.sleep", new=AsyncMock()):
            report = await client.get_token_security(TOKEN)

        assert report is None
        assert client._client.get.await_count == 3

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        client = GoPlusClient(max_rps=100.0)
        resp = _response(200)
        resp.json.side_effect = ValueError("Expecting value")
        client._client = AsyncMock()
        client._client.get = AsyncMock(return_value=resp)

        assert await client.get_token_security(TOKEN) is None
