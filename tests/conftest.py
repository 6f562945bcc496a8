import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional
import pytest
import boto3


# Ensure 'log_retention' layer is importable at collection time (module import stage)
_repo_root = Path(__file__).resolve().parents[1]
# Ensure project root and 'src' are on sys.path for flexible imports
_repo_root_str = str(_repo_root)
_src_path_str = str(_repo_root / "src")
if _repo_root_str not in sys.path:
    sys.path.insert(0, _repo_root_str)
if _src_path_str not in sys.path:
    sys.path.insert(0, _src_path_str)
_layer_path = _repo_root / "src" / "lambda" / "layers" / "common" / "python"
_layer_str = str(_layer_path)
if _layer_str not in sys.path:
    sys.path.insert(0, _layer_str)


@pytest.fixture(autouse=True)
def aws_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Ensure default AWS region is set for moto/boto3 clients and clear cross-test env leaks.

    Also removes retention settings so every test starts from the built-in defaults.
    """
    monkeypatch.setenv("AWS_REGION", os.environ.get("AWS_REGION", "us-east-1"))
    monkeypatch.setenv("AWS_DEFAULT_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1"))
    # Provide dummy credentials so botocore signing doesn't fail under moto
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", os.environ.get("AWS_ACCESS_KEY_ID", "testing"))
    monkeypatch.setenv(
        "AWS_SECRET_ACCESS_KEY",
        os.environ.get("AWS_SECRET_ACCESS_KEY", "testing"),
    )
    monkeypatch.setenv("AWS_SESSION_TOKEN", os.environ.get("AWS_SESSION_TOKEN", "testing"))

    for name in (
        "LOG_RETENTION_IN_DAYS",
        "LOG_GROUP_TAGS",
        "METRIC_NAMESPACE",
        "AWS_PARTITION",
        "AWS_LAMBDA_FUNCTION_NAME",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def retention_env(monkeypatch: pytest.MonkeyPatch) -> Callable[..., None]:
    """Apply retention Lambda environment variables.

    Usage: retention_env() for defaults or retention_env(days=7, tags={"team": "core"}).
    """

    def _apply(
        *,
        days: Optional[int] = 30,
        tags: Optional[Dict[str, str]] = None,
        namespace: str = "LogRotation",
        function_name: Optional[str] = None,
        environment: str = "dev",
    ) -> None:
        import json

        monkeypatch.setenv("ENVIRONMENT", environment)
        monkeypatch.setenv("METRIC_NAMESPACE", namespace)
        if days is not None:
            monkeypatch.setenv("LOG_RETENTION_IN_DAYS", str(days))
        if tags is not None:
            monkeypatch.setenv("LOG_GROUP_TAGS", json.dumps(tags))
        if function_name:
            monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", function_name)

    return _apply


@pytest.fixture
def load_module() -> Callable[[str], dict[str, Any]]:
    import runpy

    def _apply(path: str) -> dict[str, Any]:
        return runpy.run_path(path)

    return _apply


@pytest.fixture
def boto_stub(monkeypatch: pytest.MonkeyPatch) -> Callable[..., Any]:
    """Swap ``boto3`` in a loaded handler module for a BotoStub.

    Usage: boto_stub(main, logs=CloudWatchLogsStub(...), cloudwatch=CloudWatchStub()).
    """

    def _apply(main: Callable[..., Any], **clients: Any) -> Any:
        from tests.fixtures.clients import BotoStub

        stub = BotoStub(**clients)
        monkeypatch.setitem(main.__globals__, "boto3", stub)
        return stub

    return _apply


@pytest.fixture
def make_log_groups() -> Callable[..., List[str]]:
    """Create log groups in the moto backend, optionally with retention and tags."""

    def _create(*specs: Dict[str, Any]) -> List[str]:
        client = boto3.client("logs", region_name=os.environ.get("AWS_REGION", "us-east-1"))
        names: List[str] = []
        for spec in specs:
            name = spec["name"]
            kwargs: Dict[str, Any] = {"logGroupName": name}
            if spec.get("tags"):
                kwargs["tags"] = spec["tags"]
            client.create_log_group(**kwargs)
            if spec.get("retention"):
                client.put_retention_policy(logGroupName=name, retentionInDays=spec["retention"])
            names.append(name)
        return names

    return _create


@pytest.fixture
def fake_python_function(
    monkeypatch: pytest.MonkeyPatch,
) -> Callable[[Any], None]:
    from aws_cdk import Duration

    def _apply(target_module: Any) -> None:
        from aws_cdk import aws_lambda as lambda_

        def _fake(scope, id, **kwargs):
            return lambda_.Function(
                scope,
                id,
                function_name=kwargs.get("function_name"),
                runtime=lambda_.Runtime.PYTHON_3_12,
                handler="index.handler",
                code=lambda_.Code.from_inline("def handler(event, context): return {}"),
                memory_size=kwargs.get("memory_size", 128),
                timeout=kwargs.get("timeout", Duration.seconds(10)),
                log_retention=kwargs.get("log_retention"),
                role=kwargs.get("role"),
                layers=kwargs.get("layers", []),
                environment=kwargs.get("environment", {}),
                reserved_concurrent_executions=kwargs.get("reserved_concurrent_executions"),
            )

        def _fake_layer(scope, id, **kwargs):
            return lambda_.LayerVersion(
                scope,
                id,
                code=lambda_.Code.from_asset(str(_repo_root / "src" / "lambda" / "layers" / "common")),
                layer_version_name=kwargs.get("layer_version_name"),
                description=kwargs.get("description"),
                compatible_runtimes=kwargs.get("compatible_runtimes"),
            )

        monkeypatch.setattr(target_module, "PythonFunction", _fake, raising=False)
        monkeypatch.setattr(target_module, "PythonLayerVersion", _fake_layer, raising=False)

    return _apply


def pytest_configure(config):
    """Configure pytest with essential markers."""
    # Essential markers only
    config.addinivalue_line("markers", "unit: unit test")
    config.addinivalue_line("markers", "integration: integration test")
    config.addinivalue_line("markers", "infrastructure: CDK synthesis test")
    config.addinivalue_line("markers", "lambda_test: Lambda handler test")
    config.addinivalue_line("markers", "slow: slow running test")


def pytest_addoption(parser):
    """Add essential command line options."""
    parser.addoption("--runslow", action="store_true", default=False, help="run slow tests")


def pytest_collection_modifyitems(config, items):
    """Add markers based on file location."""
    rootdir = Path(config.rootdir)

    for item in items:
        rel_path = Path(item.fspath).relative_to(rootdir)

        if "unit" in rel_path.parts:
            item.add_marker(pytest.mark.unit)
        if "integration" in rel_path.parts:
            item.add_marker(pytest.mark.integration)
        if "lambda" in rel_path.parts:
            item.add_marker(pytest.mark.lambda_test)
        if "infrastructure" in rel_path.parts:
            item.add_marker(pytest.mark.infrastructure)


def pytest_runtest_setup(item):
    """Setup individual test runs with filtering."""
    # Skip slow tests unless --runslow is given
    if "slow" in item.keywords and not item.config.getoption("--runslow"):
        pytest.skip("need --runslow option to run")
