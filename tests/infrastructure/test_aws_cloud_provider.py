"""
Tests for the AWSCloudProvider node-group registry.

Coverage strategy
-----------------
  1. name() is the constant provider name.
  2. node_groups() returns a snapshot, never the live map.
  3. get_node_group() reports absence as (None, False).
  4. register_node_groups() registers exactly the groups the backend returns,
     issues one batched call, and leaves the map untouched on failure.
  5. refresh() re-queries the current id set, updates matching sizes only,
     keeps stale groups, is idempotent, and is atomic on failure.
  6. Readers on other threads never see a partially applied update.
"""

import asyncio
import threading
from unittest.mock import AsyncMock

import pytest

from ascent.domain.entities.node_group import NodeGroup
from ascent.domain.ports.cloud_provider_port import CloudProviderPort
from ascent.domain.value_objects.auto_scaling_group import AutoScalingGroup
from ascent.infrastructure.adapters.aws_cloud_provider import AWSCloudProvider, PROVIDER_NAME


def _snapshot(provider):
    return {ng.id: ng.target_size for ng in provider.node_groups()}


class TestCloudProviderBasics:
    def test_name(self, mock_service):
        assert AWSCloudProvider(mock_service).name() == PROVIDER_NAME == "aws"

    def test_satisfies_protocol(self, mock_service):
        assert isinstance(AWSCloudProvider(mock_service), CloudProviderPort)

    @pytest.mark.parametrize("group_ids", [[], ["1"], ["1", "2"]])
    def test_node_groups(self, mock_service, group_ids):
        provider = AWSCloudProvider(mock_service)
        for group_id in group_ids:
            provider._node_groups[group_id] = NodeGroup(
                group_id, AutoScalingGroup(name=group_id), provider
            )
        assert len(provider.node_groups()) == len(group_ids)

    def test_node_groups_is_a_copy(self, mock_service):
        provider = AWSCloudProvider(mock_service)
        provider._node_groups["1"] = NodeGroup("1", AutoScalingGroup(name="1"), provider)
        snapshot = provider.node_groups()
        snapshot.clear()
        assert len(provider.node_groups()) == 1

    def test_get_node_group_that_exists(self, mock_service):
        provider = AWSCloudProvider(mock_service)
        node_group = NodeGroup("1", AutoScalingGroup(name="1"), provider)
        provider._node_groups["1"] = node_group
        assert provider.get_node_group("1") == (node_group, True)

    def test_get_node_group_that_does_not_exist(self, mock_service):
        provider = AWSCloudProvider(mock_service)
        assert provider.get_node_group("1") == (None, False)


class TestRegisterNodeGroups:

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "expected, returned",
        [
            ({"1": False}, []),
            ({"1": True, "2": True}, ["1", "2"]),
            ({"1": True, "2": False}, ["1"]),
        ],
        ids=[
            "node group that does not exist",
            "node groups that exist",
            "some node groups don't exist",
        ],
    )
    async def test_register(self, mock_service, expected, returned):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name=name) for name in returned
        ]
        provider = AWSCloudProvider(mock_service)

        await provider.register_node_groups(*expected)

        for group_id, exists in expected.items():
            node_group, ok = provider.get_node_group(group_id)
            assert ok == exists
            if ok:
                assert node_group.id == group_id

    @pytest.mark.asyncio
    async def test_single_batched_call(self, mock_service):
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1", "2", "3")
        mock_service.describe_auto_scaling_groups.assert_awaited_once_with(["1", "2", "3"])

    @pytest.mark.asyncio
    async def test_sets_target_size(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=4, min_size=1, max_size=8)
        ]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1")

        node_group, _ = provider.get_node_group("1")
        assert node_group.target_size == 4
        assert node_group.min_size == 1
        assert node_group.max_size == 8

    @pytest.mark.asyncio
    async def test_empty_ids_pass_through_backend_error(self, mock_service):
        # Registering no groups is not validated locally; the backend decides
        err = RuntimeError("no groups")
        mock_service.describe_auto_scaling_groups.side_effect = err
        provider = AWSCloudProvider(mock_service)

        with pytest.raises(RuntimeError) as exc_info:
            await provider.register_node_groups()

        assert exc_info.value is err
        mock_service.describe_auto_scaling_groups.assert_awaited_once_with([])
        assert provider.node_groups() == []

    @pytest.mark.asyncio
    async def test_empty_ids_pass_through_backend_result(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [AutoScalingGroup(name="x")]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups()
        assert provider.get_node_group("x")[1] is True

    @pytest.mark.asyncio
    async def test_failure_leaves_registry_unchanged(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=1),
            AutoScalingGroup(name="2", desired_capacity=2),
        ]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1", "2")
        before = _snapshot(provider)

        mock_service.describe_auto_scaling_groups.side_effect = ConnectionError("boom")
        with pytest.raises(ConnectionError):
            await provider.register_node_groups("1", "2", "3")

        assert _snapshot(provider) == before

    @pytest.mark.asyncio
    async def test_reregister_replaces_entity(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=1)
        ]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1")
        first, _ = provider.get_node_group("1")

        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=5)
        ]
        await provider.register_node_groups("1")
        second, _ = provider.get_node_group("1")

        assert second is not first
        assert second.target_size == 5
        assert len(provider.node_groups()) == 1

    @pytest.mark.asyncio
    async def test_register_extends_existing_map(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [AutoScalingGroup(name="1")]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1")

        mock_service.describe_auto_scaling_groups.return_value = [AutoScalingGroup(name="2")]
        await provider.register_node_groups("2")

        assert sorted(ng.id for ng in provider.node_groups()) == ["1", "2"]

    @pytest.mark.asyncio
    async def test_keys_match_entity_ids(self, backend, cloud_provider):
        backend.add_group("a")
        backend.add_group("b")
        await cloud_provider.register_node_groups("a", "b", "c")
        for key, node_group in cloud_provider._node_groups.items():
            assert key == node_group.id


class TestRefresh:

    @pytest.mark.asyncio
    async def test_refresh_updates_target_size(self, backend, cloud_provider):
        backend.add_group("1", desired_capacity=1)
        await cloud_provider.register_node_groups("1")

        node_group, ok = cloud_provider.get_node_group("1")
        assert ok
        assert node_group.id == "1"
        assert node_group.target_size == 1

        backend.set_desired_capacity("1", 2)
        await cloud_provider.refresh()

        node_group, ok = cloud_provider.get_node_group("1")
        assert ok
        assert node_group.target_size == 2

    @pytest.mark.asyncio
    async def test_refresh_queries_registered_ids_only(self, backend, cloud_provider):
        backend.add_group("1")
        await cloud_provider.register_node_groups("1", "2")
        # "2" appears later but was never registered
        backend.add_group("2")

        await cloud_provider.refresh()

        assert backend.calls[-1] == ["1"]
        assert cloud_provider.get_node_group("2") == (None, False)

    @pytest.mark.asyncio
    async def test_vanished_group_keeps_last_size(self, backend, cloud_provider):
        backend.add_group("1", desired_capacity=3)
        backend.add_group("2", desired_capacity=4)
        await cloud_provider.register_node_groups("1", "2")

        backend.remove_group("2")
        backend.set_desired_capacity("1", 6)
        await cloud_provider.refresh()

        assert _snapshot(cloud_provider) == {"1": 6, "2": 4}

    @pytest.mark.asyncio
    async def test_refresh_ignores_unregistered_names(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=1)
        ]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1")

        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=2),
            AutoScalingGroup(name="other", desired_capacity=9),
        ]
        await provider.refresh()

        assert _snapshot(provider) == {"1": 2}

    @pytest.mark.asyncio
    async def test_refresh_is_idempotent(self, backend, cloud_provider):
        backend.add_group("1", desired_capacity=3)
        backend.add_group("2", desired_capacity=5)
        await cloud_provider.register_node_groups("1", "2")

        await cloud_provider.refresh()
        first = _snapshot(cloud_provider)
        await cloud_provider.refresh()
        assert _snapshot(cloud_provider) == first

    @pytest.mark.asyncio
    async def test_refresh_failure_leaves_sizes(self, backend, cloud_provider):
        backend.add_group("1", desired_capacity=1)
        backend.add_group("2", desired_capacity=1)
        await cloud_provider.register_node_groups("1", "2")

        backend.set_desired_capacity("1", 10)
        backend.error = TimeoutError("describe timed out")
        with pytest.raises(TimeoutError):
            await cloud_provider.refresh()

        assert _snapshot(cloud_provider) == {"1": 1, "2": 1}

    @pytest.mark.asyncio
    async def test_refresh_empty_registry(self, mock_service):
        provider = AWSCloudProvider(mock_service)
        await provider.refresh()
        mock_service.describe_auto_scaling_groups.assert_awaited_once_with([])
        assert provider.node_groups() == []

    @pytest.mark.asyncio
    async def test_refresh_keeps_entity_identity(self, backend, cloud_provider):
        backend.add_group("1", desired_capacity=1)
        await cloud_provider.register_node_groups("1")
        before, _ = cloud_provider.get_node_group("1")

        backend.set_desired_capacity("1", 2)
        await cloud_provider.refresh()

        after, _ = cloud_provider.get_node_group("1")
        assert after is before


class TestConcurrency:

    @pytest.mark.asyncio
    async def test_readers_not_blocked_by_remote_call(self, mock_service):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_describe(names):
            started.set()
            await release.wait()
            return [AutoScalingGroup(name=n, desired_capacity=1) for n in names]

        mock_service.describe_auto_scaling_groups = AsyncMock(side_effect=slow_describe)
        provider = AWSCloudProvider(mock_service)

        task = asyncio.create_task(provider.register_node_groups("1"))
        await started.wait()

        # Remote call in flight: reads return immediately with the old state
        assert provider.node_groups() == []
        assert provider.get_node_group("1") == (None, False)

        release.set()
        await task
        assert provider.get_node_group("1")[1] is True

    @pytest.mark.asyncio
    async def test_refresh_does_not_overwrite_newer_registration(self, mock_service):
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name="1", desired_capacity=1)
        ]
        provider = AWSCloudProvider(mock_service)
        await provider.register_node_groups("1")

        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_describe(names):
            started.set()
            await release.wait()
            return [AutoScalingGroup(name="1", desired_capacity=1)]

        mock_service.describe_auto_scaling_groups = AsyncMock(side_effect=slow_describe)
        refresh = asyncio.create_task(provider.refresh())
        await started.wait()

        mock_service.describe_auto_scaling_groups = AsyncMock(
            return_value=[AutoScalingGroup(name="1", desired_capacity=5)]
        )
        await provider.register_node_groups("1")
        assert provider.get_node_group("1")[0].target_size == 5

        release.set()
        await refresh

        assert provider.get_node_group("1")[0].target_size == 5

    @pytest.mark.asyncio
    async def test_threaded_readers_see_whole_updates(self, mock_service):
        ids = [str(i) for i in range(50)]
        mock_service.describe_auto_scaling_groups.return_value = [
            AutoScalingGroup(name=i) for i in ids
        ]
        provider = AWSCloudProvider(mock_service)
        observed: list[int] = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                observed.append(len(provider.node_groups()))

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            await provider.register_node_groups(*ids)
        finally:
            stop.set()
            thread.join()

        assert set(observed) <= {0, len(ids)}
        assert len(provider.node_groups()) == len(ids)
