import pytest

from log_retention.clients.logs import CloudWatchLogsClient
from log_retention.errors import OperationError, Severity
from log_retention.models.results import BatchResultBuilder, ReconciliationOutcome
from log_retention.models.settings import RetentionConfig
from log_retention.retention.sweep import reconcile_all, sweep_all
from tests.fixtures.clients import CloudWatchLogsStub, RecordingPublisher, describe_item, log_group_arn


pytestmark = [pytest.mark.unit]


CONFIG = RetentionConfig(default_retention_days=30, provenance_tags={"team": "platform"})
METRIC_ORDER = ["Total", "Updated", "AlreadyHasRetention", "AlreadyTaggedWithRetention", "Errored"]


def _three_page_stub() -> CloudWatchLogsStub:
    return CloudWatchLogsStub(
        [
            [describe_item("g1")],
            [describe_item("g2", retention=90)],
            [describe_item("g3")],
        ],
        tags={log_group_arn("g3"): {"retention": "keep"}},
    )


def test_sweep_walks_every_page_and_summarises() -> None:
    """
    Given: 세 페이지에 걸친 g1(미설정), g2(90일), g3(예외 태그)
    When: sweep_all 실행
    Then: 네 개 카운트를 담은 요약 반환, 다섯 개 지표를 한 번에 발행
    """
    stub = _three_page_stub()
    publisher = RecordingPublisher()

    summary = sweep_all(CloudWatchLogsClient(stub), publisher, CONFIG)

    assert summary == {
        "message": "Success",
        "totalGroups": 3,
        "updated": 1,
        "alreadyHasRetention": 1,
        "alreadyTaggedWithRetention": 1,
    }
    assert len(publisher.batches) == 1
    batch = publisher.batches[0]
    assert [m.name.value for m in batch] == METRIC_ORDER
    assert [m.value for m in batch] == [3, 1, 1, 1, 0]
    assert stub.retention_calls == [("g1", 30)]


def test_sweep_pagination_tokens() -> None:
    """
    Given: 세 페이지 목록
    When: sweep_all 실행
    Then: 첫 요청은 토큰 없이, 이후 요청은 직전 응답의 토큰으로 호출
    """
    stub = _three_page_stub()

    sweep_all(CloudWatchLogsClient(stub), RecordingPublisher(), CONFIG)

    assert stub.describe_calls == [{}, {"nextToken": "1"}, {"nextToken": "2"}]


def test_sweep_partial_failure_processes_every_group() -> None:
    """
    Given: 네 개 그룹 중 /b의 보존 기간 설정이 실패
    When: sweep_all 실행
    Then: 모든 그룹 처리, 정확한 지표 한 번 발행, 실패 상세를 담은 ERROR 발생
    """
    stub = CloudWatchLogsStub(
        [[describe_item("/a"), describe_item("/b"), describe_item("/c", retention=14), describe_item("/d")]],
        fail={"PutRetentionPolicy": ["/b"]},
    )
    publisher = RecordingPublisher()

    with pytest.raises(OperationError) as exc_info:
        sweep_all(CloudWatchLogsClient(stub), publisher, CONFIG)

    err = exc_info.value
    assert err.severity is Severity.ERROR
    assert "1 of 4" in err.message
    assert "/b" in err.message
    assert "PutRetentionPolicy failed" in err.message
    assert stub.retention_calls == [("/a", 30), ("/d", 30)]

    assert len(publisher.batches) == 1
    values = publisher.values()
    assert values == {
        "Total": 4,
        "Updated": 2,
        "AlreadyHasRetention": 1,
        "AlreadyTaggedWithRetention": 0,
        "Errored": 1,
    }


def test_sweep_failure_lists_every_error() -> None:
    """
    Given: 두 그룹의 태그 조회가 실패
    When: sweep_all 실행
    Then: 오류 메시지에 두 실패가 모두 포함
    """
    stub = CloudWatchLogsStub(
        [[describe_item("/x"), describe_item("/y")]],
        fail={"ListTagsForResource": [log_group_arn("/x"), log_group_arn("/y")]},
    )

    with pytest.raises(OperationError) as exc_info:
        sweep_all(CloudWatchLogsClient(stub), RecordingPublisher(), CONFIG)

    assert log_group_arn("/x") in exc_info.value.message
    assert log_group_arn("/y") in exc_info.value.message
    assert "2 of 2" in exc_info.value.message


def test_sweep_listing_failure_still_publishes_counts() -> None:
    """
    Given: 두 번째 페이지 조회가 실패
    When: sweep_all 실행
    Then: 목록 오류가 전파되고 그때까지의 지표는 발행
    """
    stub = CloudWatchLogsStub(
        [[describe_item("g1")], [describe_item("g2")]],
        fail={"DescribeLogGroups": ["1"]},
    )
    publisher = RecordingPublisher()

    with pytest.raises(OperationError) as exc_info:
        sweep_all(CloudWatchLogsClient(stub), publisher, CONFIG)

    assert "DescribeLogGroups failed" in exc_info.value.message
    assert len(publisher.batches) == 1
    assert publisher.values()["Total"] == 1
    assert publisher.values()["Updated"] == 1


def test_sweep_empty_account() -> None:
    """
    Given: 로그 그룹이 없는 계정
    When: sweep_all 실행
    Then: 0 요약 반환, 0 값 지표도 한 번 발행
    """
    publisher = RecordingPublisher()

    summary = sweep_all(CloudWatchLogsClient(CloudWatchLogsStub()), publisher, CONFIG)

    assert summary["totalGroups"] == 0
    assert [m.value for m in publisher.batches[0]] == [0, 0, 0, 0, 0]


def test_sweep_with_prefix_filters_listing() -> None:
    """
    Given: 접두사가 지정된 스윕
    When: sweep_all 실행
    Then: 접두사로 목록을 요청하고 일치하는 그룹만 처리
    """
    stub = CloudWatchLogsStub([[describe_item("/aws/lambda/a"), describe_item("/ecs/b")]])

    summary = sweep_all(CloudWatchLogsClient(stub), RecordingPublisher(), CONFIG, prefix="/aws/lambda/")

    assert stub.describe_calls == [{"logGroupNamePrefix": "/aws/lambda/"}]
    assert summary["totalGroups"] == 1
    assert stub.retention_calls == [("/aws/lambda/a", 30)]


def test_reconcile_all_keeps_aggregate_invariant() -> None:
    """
    Given: 결과가 섞인 그룹 목록
    When: reconcile_all 실행
    Then: total == updated + alreadyHasRetention + exempt + errored
    """
    stub = CloudWatchLogsStub(
        [
            [describe_item("/1"), describe_item("/2", retention=3)],
            [describe_item("/3"), describe_item("/4"), describe_item("/5")],
        ],
        tags={log_group_arn("/3"): {"retention": "none"}},
        fail={"PutRetentionPolicy": ["/4"]},
    )
    builder = BatchResultBuilder()

    reconcile_all(CloudWatchLogsClient(stub), CONFIG, builder)
    result = builder.build()

    assert result.total == 5
    assert result.total == (
        result.updated + result.already_has_retention + result.already_tagged_for_exemption + result.errored
    )
    assert builder.counts[ReconciliationOutcome.UPDATED] == 2
    assert result.errored == 1
