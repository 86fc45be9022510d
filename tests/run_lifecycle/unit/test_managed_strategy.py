"""Managed execution strategy tests."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from catalog_e2e_tester.configuration import ExecutionMode, ManagedBuildSettings
from catalog_e2e_tester.run_identification import RunIdentifier, RunKind
from catalog_e2e_tester.run_lifecycle import ManagedExecutionStrategy, WaitOutcome
from catalog_e2e_tester.scope_management import ExecutionScope, PublishedStepAction

_SCOPE = ExecutionScope(id="scope-1", mode=ExecutionMode.MANAGED)
_RUN = RunIdentifier(name="e2e-scope-1", kind=RunKind.TASK_RUN)


class FakeCloudBuild:
    def __init__(self, *descriptions: dict) -> None:
        self.descriptions = list(descriptions)
        self.applied: list[Path] = []
        self.described: list[str] = []

    def apply_run(self, document_path):
        self.applied.append(Path(document_path))
        return ""

    def describe_run(self, run_id):
        self.described.append(run_id)
        if len(self.descriptions) > 1:
            description = self.descriptions.pop(0)
        else:
            description = self.descriptions[0]
        return description, json.dumps(description)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _settings() -> ManagedBuildSettings:
    return ManagedBuildSettings(
        project="p",
        region="r",
        bundle_repository="registry.example/bundles",
        service_account="sa@p",
        name_prefix="e2e-",
    )


def _strategy(cloud_build: FakeCloudBuild, clock: FakeClock) -> ManagedExecutionStrategy:
    return ManagedExecutionStrategy(
        _settings(), cloud_build, poll_interval_seconds=5, sleep=clock.sleep, clock=clock
    )


def test_submit_writes_rewritten_document_beside_manifest(tmp_path: Path) -> None:
    manifest = tmp_path / "basic.yaml"
    manifest.write_text(
        "kind: TaskRun\nmetadata:\n  name: clone-run\nspec:\n  taskSpec:\n    steps:\n"
        "      - ref:\n          name: git-clone-s1\n",
        encoding="utf-8",
    )
    cloud_build = FakeCloudBuild({})

    run = _strategy(cloud_build, FakeClock()).submit(
        manifest, _SCOPE, PublishedStepAction(name="git-clone-s1", bundle_ref="reg/b:scope-1")
    )

    assert run == _RUN
    assert cloud_build.applied == [tmp_path / "basic.managed.yaml"]
    submitted = yaml.safe_load(cloud_build.applied[0].read_text(encoding="utf-8"))
    assert submitted["metadata"]["name"] == "e2e-scope-1"
    assert submitted["spec"]["taskSpec"]["steps"][0]["ref"]["resolver"] == "bundles"


def test_polls_until_condition_is_true_at_any_position() -> None:
    clock = FakeClock()
    cloud_build = FakeCloudBuild(
        {"conditions": [{"type": "Succeeded", "status": "UNKNOWN"}]},
        {
            "conditions": [
                {"type": "Ready", "status": "TRUE"},
                {"type": "Succeeded", "status": "TRUE"},
            ]
        },
    )

    result = _strategy(cloud_build, clock).wait(
        _RUN, _SCOPE, expected_condition="Succeeded", timeout_seconds=60
    )

    assert result.outcome is WaitOutcome.SUCCEEDED
    assert cloud_build.described == ["e2e-scope-1", "e2e-scope-1"]
    assert clock.sleeps == [5]


def test_false_condition_fails_with_reason() -> None:
    cloud_build = FakeCloudBuild(
        {"status": {"conditions": [{"type": "Succeeded", "status": "FALSE", "reason": "Failed"}]}}
    )

    result = _strategy(cloud_build, FakeClock()).wait(
        _RUN, _SCOPE, expected_condition="Succeeded", timeout_seconds=60
    )

    assert result.outcome is WaitOutcome.FAILED
    assert "Failed" in result.reason
    assert '"FALSE"' in result.diagnostics


def test_times_out_when_condition_never_settles() -> None:
    clock = FakeClock()
    cloud_build = FakeCloudBuild({"conditions": [{"type": "Succeeded", "status": "UNKNOWN"}]})

    result = _strategy(cloud_build, clock).wait(
        _RUN, _SCOPE, expected_condition="Succeeded", timeout_seconds=12
    )

    assert result.outcome is WaitOutcome.TIMED_OUT
    assert clock.sleeps == [5, 5, 2]
    assert "UNKNOWN" in result.reason
