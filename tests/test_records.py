"""Tests for building invocation records."""

from __future__ import annotations

import dataclasses
import sys
import warnings
from datetime import datetime
from datetime import timezone
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / 'backend' / 'src'))

from app.exceptions import MalformedInputWarning
from app.services.records import (
    DEFAULT_MESSAGE,
    InvocationRequest,
    build_record,
    extract_message,
)

NOW = datetime(2026, 10, 17, 12, 0, 0, tzinfo=timezone.utc)


def _request(payload, **kwargs) -> InvocationRequest:
    return InvocationRequest(payload=payload, request_id='req-1', **kwargs)


class TestInvocationRequest:
    """Tests for InvocationRequest.from_lambda."""

    def test_reads_lambda_context(self, make_context) -> None:
        context = make_context(
            aws_request_id='req-42',
            log_stream_name='stream-a',
            memory_limit_in_mb='512',
            remaining_time_ms=2500,
        )

        request = InvocationRequest.from_lambda({'message': 'hi'}, context)

        assert request.payload == {'message': 'hi'}
        assert request.request_id == 'req-42'
        assert request.instance_id == 'stream-a'
        assert request.memory_limit_mb == 512
        assert request.remaining_time_ms == 2500

    def test_tolerates_sparse_context(self) -> None:
        request = InvocationRequest.from_lambda({}, object())
        assert request.request_id == ''
        assert request.instance_id is None
        assert request.memory_limit_mb is None
        assert request.remaining_time_ms is None

    def test_ignores_unparseable_memory_limit(self, make_context) -> None:
        context = make_context(memory_limit_in_mb='lots')
        assert InvocationRequest.from_lambda({}, context).memory_limit_mb is None


class TestBuildRecord:
    """Tests for build_record."""

    def test_copies_message_and_context(self) -> None:
        request = _request(
            {'message': 'Hi from Jane'},
            instance_id='stream-a',
            memory_limit_mb=128,
        )

        record = build_record(request, invocation_count=1, now=NOW)

        assert record.message == 'Hi from Jane'
        assert record.invocation_count == 1
        assert record.request_id == 'req-1'
        assert record.timestamp == NOW
        assert record.instance_id == 'stream-a'
        assert record.allocated_memory_mb == 128

    def test_deadline_is_timestamp_plus_remaining_time(self) -> None:
        record = build_record(_request({}, remaining_time_ms=3000), 1, now=NOW)
        assert record.execution_deadline_ms == int(NOW.timestamp() * 1000) + 3000

    def test_deadline_unknown_without_remaining_time(self) -> None:
        assert build_record(_request({}), 1, now=NOW).execution_deadline_ms is None

    def test_records_cpu_cores(self, mocker) -> None:
        mocker.patch('app.services.records.os.cpu_count', return_value=2)
        assert build_record(_request({}), 1, now=NOW).cpu_cores == 2

    def test_defaults_timestamp_to_utc_now(self) -> None:
        record = build_record(_request({}), 1)
        assert record.timestamp.tzinfo is timezone.utc

    def test_record_is_immutable(self) -> None:
        record = build_record(_request({}), 1, now=NOW)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.invocation_count = 2  # type: ignore[misc]

    def test_to_dict(self) -> None:
        record = build_record(_request({'message': 'x'}), 3, now=NOW)
        assert record.to_dict()['invocation_count'] == 3
        assert record.to_dict()['message'] == 'x'


class TestExtractMessage:
    """Tests for message extraction and graceful degradation."""

    def test_missing_message_uses_default_without_warning(self) -> None:
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            assert extract_message({}) == DEFAULT_MESSAGE

    def test_null_message_uses_default(self) -> None:
        assert extract_message({'message': None}) == DEFAULT_MESSAGE

    def test_empty_string_is_kept(self) -> None:
        assert extract_message({'message': ''}) == ''

    def test_extra_fields_are_ignored(self) -> None:
        assert extract_message({'message': 'hello', 'other': [1, 2]}) == 'hello'

    @pytest.mark.parametrize('value', [42, 1.5, True, ['a'], {'text': 'a'}])
    def test_non_string_message_degrades_with_warning(self, value) -> None:
        with pytest.warns(MalformedInputWarning):
            assert extract_message({'message': value}) == DEFAULT_MESSAGE

    @pytest.mark.parametrize('payload', [None, 'just text', [1, 2, 3]])
    def test_non_object_payload_degrades_with_warning(self, payload) -> None:
        with pytest.warns(MalformedInputWarning):
            assert extract_message(payload) == DEFAULT_MESSAGE

    def test_lone_surrogate_degrades_with_warning(self) -> None:
        with pytest.warns(MalformedInputWarning):
            assert extract_message({'message': 'ok \ud800'}) == DEFAULT_MESSAGE

    def test_build_record_never_fails_on_malformed_message(self) -> None:
        with pytest.warns(MalformedInputWarning):
            record = build_record(_request({'message': 7}), 5, now=NOW)
        assert record.message == DEFAULT_MESSAGE
        assert record.invocation_count == 5
