import pytest

from capital_client.models import (
    SessionState,
    StreamEnvelope,
    check_direction,
    check_ohlc_types,
    check_order_type,
    check_resolutions,
    parse_ohlc,
    parse_quote,
)


def test_envelope_omits_absent_fields() -> None:
    envelope = StreamEnvelope(
        destination="ping", correlation_id="7", cst="a", security_token="b"
    )
    assert envelope.to_wire() == {
        "destination": "ping",
        "correlationId": "7",
        "cst": "a",
        "securityToken": "b",
    }


def test_envelope_from_inbound_frame() -> None:
    frame = {
        "status": "OK",
        "destination": "marketData.subscribe",
        "correlationId": 2,
        "payload": {"subscriptions": {"GOLD": "PROCESSED"}},
    }
    envelope = StreamEnvelope.from_wire(frame)
    assert envelope.destination == "marketData.subscribe"
    assert envelope.correlation_id == "2"
    assert envelope.status == "OK"
    assert envelope.cst is None


def test_parse_quote_maps_vendor_names() -> None:
    quote = parse_quote(
        {"epic": "GOLD", "product": "CFD", "bid": 1.0, "bidQty": 2, "ofr": 1.5, "ofrQty": 3}
    )
    assert quote.epic == "GOLD"
    assert quote.offer == 1.5
    assert quote.offer_qty == 3
    assert quote.timestamp is None


def test_parse_ohlc_tolerates_missing_payload() -> None:
    bar = parse_ohlc(None)
    assert bar.epic is None
    assert bar.raw == {}


def test_session_state_tokens() -> None:
    state = SessionState(cst="c", security_token="s", account_id="1")
    assert state.is_authenticated()
    assert state.tokens() == {"cst": "c", "security_token": "s"}
    state.clear()
    assert not state.is_authenticated()
    assert state.account_id is None


def test_vocabulary_checks() -> None:
    assert check_direction("sell") == "SELL"
    assert check_order_type("stop") == "STOP"
    assert check_resolutions(["MINUTE_5", "DAY"]) == ["MINUTE_5", "DAY"]
    assert check_ohlc_types(["heikin-ashi"]) == ["heikin-ashi"]
    with pytest.raises(ValueError):
        check_direction("LONG")
    with pytest.raises(ValueError):
        check_ohlc_types(["renko"])
