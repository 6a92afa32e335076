# vksim/kube/provider.py
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Union

from kubernetes import client

from ..config import capacity_from_config, load_node_config, resource_list
from ..model.entities import WorkloadRecord
from ..sim.aggregator import UsageAggregator, UsageSnapshot
from ..sim.engine import Clock, SimEngine, build_key, utc_now
from ..sim.status import Rejected, Running, Succeeded, WorkloadStatus
from ..spec.schema import NodeConfig
from .manifest import container_names

log = logging.getLogger(__name__)

SIM_SPEC_ANNOTATION = "simSpec"
OPERATING_SYSTEM = "Simulated"

# fixed addresses reported for every simulated pod
POD_HOST_IP = "1.2.3.4"
POD_IP = "5.6.7.8"


def _key_of(pod: client.V1Pod):
    meta = pod.metadata or client.V1ObjectMeta()
    return build_key(meta.namespace or "", meta.name or "")


def _name_of(pod: client.V1Pod) -> Optional[str]:
    return pod.metadata.name if pod.metadata else None


def _sim_spec_of(pod: client.V1Pod) -> Optional[str]:
    annotations = (pod.metadata.annotations if pod.metadata else None) or {}
    return annotations.get(SIM_SPEC_ANNOTATION)


class SimProvider:
    """
    Virtual-kubelet style provider backed by SimEngine.

    Pods are stored in memory, their simSpec annotation drives admission and
    the reported status; no container is ever started.
    """

    def __init__(
        self,
        node_name: str,
        config: NodeConfig,
        internal_ip: str = "127.0.0.1",
        daemon_endpoint_port: int = 10250,
        clock: Clock = utc_now,
        usage_interval_sec: float = 1.0,
    ) -> None:
        self.node_name = node_name
        self.internal_ip = internal_ip
        self.daemon_endpoint_port = daemon_endpoint_port
        self.engine = SimEngine(
            capacity=capacity_from_config(config),
            clock=clock,
            container_names=container_names,
        )
        self.aggregator = UsageAggregator(
            self.engine.registry, self.engine.resolve_time, interval_sec=usage_interval_sec
        )

    @classmethod
    def from_config_file(
        cls,
        config_path: Optional[Union[str, Path]],
        node_name: str,
        internal_ip: str = "127.0.0.1",
        daemon_endpoint_port: int = 10250,
        clock: Clock = utc_now,
    ) -> SimProvider:
        config = load_node_config(config_path, node_name)
        return cls(node_name, config, internal_ip, daemon_endpoint_port, clock)

    # --- background usage refresh ---
    def start(self) -> None:
        self.aggregator.start()

    def stop(self) -> None:
        self.aggregator.stop()

    def __enter__(self) -> SimProvider:
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()

    # --- pod lifecycle ---
    def create_pod(self, pod: client.V1Pod, now: Optional[datetime] = None) -> WorkloadRecord:
        log.info(f"receive CreatePod {_name_of(pod)!r}")
        key = _key_of(pod)
        return self.engine.create_workload(key, pod, _sim_spec_of(pod), now)

    def update_pod(self, pod: client.V1Pod) -> WorkloadRecord:
        log.info(f"receive UpdatePod {_name_of(pod)!r}")
        return self.engine.update_workload(_key_of(pod), pod)

    def delete_pod(self, pod: client.V1Pod) -> None:
        log.info(f"receive DeletePod {_name_of(pod)!r}")
        self.engine.delete_workload(_key_of(pod))

    def get_pod(self, namespace: str, name: str) -> Optional[client.V1Pod]:
        log.info(f"receive GetPod {name!r}")
        return self.engine.get_workload(build_key(namespace, name))

    def get_pods(self) -> List[client.V1Pod]:
        log.info("receive GetPods")
        return self.engine.list_workloads()

    def get_pod_status(
        self, namespace: str, name: str, now: Optional[datetime] = None
    ) -> Optional[client.V1PodStatus]:
        log.info(f"receive GetPodStatus {name!r}")
        key = build_key(namespace, name)
        pod = self.engine.get_workload(key)
        status = self.engine.get_status(key, now)
        if pod is None or status is None:
            return None
        return pod_status(pod, status)

    def get_container_logs(self, namespace: str, pod_name: str, container_name: str, tail: int = 0) -> str:
        log.info(f"receive GetContainerLogs {pod_name!r}")
        return ""

    # --- node status ---
    def capacity(self) -> Dict[str, str]:
        return resource_list(self.engine.get_capacity())

    def node_usage(self) -> UsageSnapshot:
        """Last aggregated usage; computed on the spot if the aggregator never ran."""
        snap = self.aggregator.snapshot
        if snap.at is None:
            snap = self.aggregator.refresh()
        return snap

    def node_conditions(self) -> List[client.V1NodeCondition]:
        now = self.engine.resolve_time()

        def cond(type_: str, status: str, reason: str, message: str) -> client.V1NodeCondition:
            return client.V1NodeCondition(
                type=type_,
                status=status,
                last_heartbeat_time=now,
                last_transition_time=now,
                reason=reason,
                message=message,
            )

        return [
            cond("Ready", "True", "KubeletReady", "kubelet is ready."),
            cond("PIDPressure", "False", "KubeletHasSufficientPID", "kubelet has sufficient PID available"),
            cond("MemoryPressure", "False", "KubeletHasSufficientMemory", "kubelet has sufficient memory available"),
            cond("DiskPressure", "False", "KubeletHasNoDiskPressure", "kubelet has no disk pressure"),
            cond("NetworkUnavailable", "False", "RouteCreated", "RouteController created a route"),
        ]

    def node_addresses(self) -> List[client.V1NodeAddress]:
        return [client.V1NodeAddress(type="InternalIP", address=self.internal_ip)]

    def node_daemon_endpoints(self) -> client.V1NodeDaemonEndpoints:
        return client.V1NodeDaemonEndpoints(
            kubelet_endpoint=client.V1DaemonEndpoint(port=self.daemon_endpoint_port)
        )

    def operating_system(self) -> str:
        return OPERATING_SYSTEM


# ---------------------------------------------------------------------------
# WorkloadStatus -> V1PodStatus
# ---------------------------------------------------------------------------


def _container_state(state) -> client.V1ContainerState:
    if state.terminated:
        return client.V1ContainerState(
            terminated=client.V1ContainerStateTerminated(
                exit_code=state.exit_code,
                reason="Completed",
                started_at=state.started_at,
                finished_at=state.finished_at,
            )
        )
    return client.V1ContainerState(running=client.V1ContainerStateRunning(started_at=state.started_at))


def pod_status(pod: client.V1Pod, status: WorkloadStatus) -> client.V1PodStatus:
    phase = status.phase
    if isinstance(phase, Rejected):
        return client.V1PodStatus(phase="Failed", reason=phase.reason, message=phase.message)

    images = {c.name: c.image for c in (pod.spec.containers if pod.spec else None) or []}
    container_statuses = [
        client.V1ContainerStatus(
            name=c.name,
            image=images.get(c.name) or "",
            image_id="",
            ready=not c.terminated,
            restart_count=0,
            state=_container_state(c),
        )
        for c in status.containers
    ]
    conditions = [
        client.V1PodCondition(type=c.type, status="True" if c.status else "False")
        for c in status.conditions
    ]

    if isinstance(phase, Succeeded):
        pod_phase = "Succeeded"
    elif isinstance(phase, Running):
        pod_phase = "Running"
    else:
        raise TypeError(f"unknown lifecycle phase {phase!r}")

    return client.V1PodStatus(
        phase=pod_phase,
        host_ip=POD_HOST_IP,
        pod_ip=POD_IP,
        start_time=phase.started_at,
        conditions=conditions,
        container_statuses=container_statuses,
    )
