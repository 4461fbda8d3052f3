"""Tests for ExchangeChannel."""

import logging
from unittest.mock import Mock

import pytest

from relay_messaging.channel import ExchangeChannel
from relay_messaging.config import Settings
from relay_messaging.consumer import ConsumerSpec
from relay_messaging.contracts import IBrokerConnection
from relay_messaging.exchange import Exchange
from relay_messaging.results import FailureKind, Outcome


@pytest.fixture
def mock_channel():
    return Mock()


@pytest.fixture
def mock_connection(mock_channel):
    connection = Mock(spec=IBrokerConnection)
    blocking_connection = Mock()
    blocking_connection.channel.return_value = mock_channel
    connection.connect.return_value = Outcome.success(blocking_connection)
    return connection


@pytest.fixture
def settings():
    return Settings.from_mapping({"RABBIT_HOST": "localhost", "EXCHANGE_OUT": "out-x"})


def make_channel(settings, connection, dispatch_factory=None):
    if dispatch_factory is None:
        dispatch_factory = Mock()
    return ExchangeChannel(settings, connection=connection, dispatch_factory=dispatch_factory)


def test_establish_declares_output_and_defaults_input(settings, mock_connection, mock_channel):
    channel = make_channel(settings, mock_connection)

    outcome = channel.establish()

    assert outcome.ok
    assert outcome.value is channel
    assert channel.channel is mock_channel
    assert channel.exchange_in == Exchange(name="")
    assert channel.exchange_in.is_default
    assert channel.exchange_out == Exchange(name="out-x")
    assert settings.exchange == ""
    mock_channel.exchange_declare.assert_called_once_with(exchange="out-x", exchange_type="direct")


def test_establish_declares_named_input_exchange(mock_connection, mock_channel):
    settings = Settings.from_mapping({"EXCHANGE": "in-x", "EXCHANGE_OUT": "out-x"})
    channel = make_channel(settings, mock_connection)

    channel.establish()

    assert [c.kwargs["exchange"] for c in mock_channel.exchange_declare.call_args_list] == [
        "in-x",
        "out-x",
    ]


@pytest.mark.parametrize("exchange_out", [None, ""])
def test_missing_output_exchange_fails(mock_connection, exchange_out, caplog):
    settings = Settings.from_mapping({"RABBIT_HOST": "localhost"})
    settings.exchange_out = exchange_out
    dispatch_factory = Mock()
    channel = make_channel(settings, mock_connection, dispatch_factory)

    with caplog.at_level(logging.ERROR):
        outcome = channel.establish()

    assert outcome.failure.kind is FailureKind.MISSING_OUTPUT_EXCHANGE
    assert outcome.failure.kind.is_fatal
    assert "An output exchange must be configured. Exiting." in caplog.text
    assert channel.exchange_out is None
    with pytest.raises(RuntimeError):
        channel.add_consumer(ConsumerSpec(handler=Mock()))
    dispatch_factory.assert_not_called()


def test_connection_failure_is_passed_through(settings, mock_connection, mock_channel):
    mock_connection.connect.return_value = Outcome.failed(
        FailureKind.CONNECTION_EXHAUSTED, "gave up"
    )
    channel = make_channel(settings, mock_connection)

    outcome = channel.establish()

    assert outcome.failure.kind is FailureKind.CONNECTION_EXHAUSTED
    assert channel.channel is None
    mock_channel.exchange_declare.assert_not_called()


def test_establish_runs_topology_once(settings, mock_connection, mock_channel):
    channel = make_channel(settings, mock_connection)

    channel.establish()
    channel.establish()

    mock_connection.connect.assert_called_once()
    mock_channel.exchange_declare.assert_called_once()


def test_direct_declares_each_exchange_once(settings, mock_connection, mock_channel):
    channel = make_channel(settings, mock_connection)
    channel.establish()
    mock_channel.exchange_declare.reset_mock()

    first = channel.direct("audit")
    second = channel.direct("audit")

    assert first is second
    mock_channel.exchange_declare.assert_called_once_with(exchange="audit", exchange_type="direct")


def test_same_input_and_output_exchange_is_declared_once(mock_connection, mock_channel):
    settings = Settings.from_mapping({"EXCHANGE": "relay", "EXCHANGE_OUT": "relay"})
    channel = make_channel(settings, mock_connection)

    channel.establish()

    assert channel.exchange_in is channel.exchange_out
    mock_channel.exchange_declare.assert_called_once()


def test_direct_requires_channel(settings, mock_connection):
    channel = make_channel(settings, mock_connection)

    with pytest.raises(RuntimeError):
        channel.direct("audit")


def test_add_consumer_builds_and_starts_dispatch_unit(settings, mock_connection, mock_channel):
    dispatch_factory = Mock()
    channel = make_channel(settings, mock_connection, dispatch_factory)
    channel.establish()
    spec = ConsumerSpec(handler=Mock(), queue_name="jobs")

    result = channel.add_consumer(spec)

    assert result is None
    dispatch_factory.assert_called_once_with(
        spec, mock_channel, channel.exchange_in, channel.exchange_out
    )
    dispatch_factory.return_value.start.assert_called_once()


def test_add_consumer_many_times_shares_channel(settings, mock_connection, mock_channel):
    dispatch_factory = Mock()
    channel = make_channel(settings, mock_connection, dispatch_factory)
    channel.establish()

    channel.add_consumer(ConsumerSpec(handler=Mock(), queue_name="a"))
    channel.add_consumer(ConsumerSpec(handler=Mock(), queue_name="b"))

    assert dispatch_factory.call_count == 2
    assert {c.args[1] for c in dispatch_factory.call_args_list} == {mock_channel}
    mock_connection.connect.assert_called_once()


def test_add_consumer_propagates_start_failure(settings, mock_connection):
    dispatch_factory = Mock()
    dispatch_factory.return_value.start.side_effect = ValueError("queue in use")
    channel = make_channel(settings, mock_connection, dispatch_factory)
    channel.establish()

    with pytest.raises(ValueError, match="queue in use"):
        channel.add_consumer(ConsumerSpec(handler=Mock()))


def test_add_consumer_requires_established_topology(settings, mock_connection):
    channel = make_channel(settings, mock_connection)

    with pytest.raises(RuntimeError):
        channel.add_consumer(ConsumerSpec(handler=Mock()))


def test_consume_forever_stops_on_interrupt(settings, mock_connection, mock_channel):
    mock_channel.start_consuming.side_effect = KeyboardInterrupt()
    mock_channel.is_closed = False
    channel = make_channel(settings, mock_connection)
    channel.establish()

    channel.consume_forever()

    mock_channel.stop_consuming.assert_called_once()
    mock_channel.close.assert_called_once()
    mock_connection.close.assert_called_once()


def test_close_skips_closed_channel(settings, mock_connection, mock_channel):
    mock_channel.is_closed = True
    channel = make_channel(settings, mock_connection)
    channel.establish()

    channel.close()

    mock_channel.close.assert_not_called()
    mock_connection.close.assert_called_once()


def test_retry_after_missing_output_exchange_reuses_channel(mock_connection, mock_channel):
    mock_channel.is_closed = False
    settings = Settings.from_mapping({"RABBIT_HOST": "localhost"})
    channel = make_channel(settings, mock_connection)
    assert channel.establish().failure.kind is FailureKind.MISSING_OUTPUT_EXCHANGE

    settings.set("exchange_out", "out-x")
    outcome = channel.establish()

    assert outcome.ok
    assert channel.channel is mock_channel
    mock_connection.connect.return_value.value.channel.assert_called_once()


def test_establish_reopens_closed_channel(mock_connection, mock_channel):
    settings = Settings.from_mapping({"RABBIT_HOST": "localhost"})
    channel = make_channel(settings, mock_connection)
    channel.establish()
    mock_channel.is_closed = True
    settings.set("exchange_out", "out-x")

    channel.establish()

    assert mock_connection.connect.return_value.value.channel.call_count == 2
