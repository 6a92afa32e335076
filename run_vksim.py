# run_vksim.py
import argparse
import logging
from datetime import timedelta

import yaml

from vksim.kube.manifest import load_manifests
from vksim.kube.provider import SimProvider
from vksim.model.errors import SimError
from vksim.sim.engine import build_key, utc_now
from vksim.sim.status import Running

# Logging for the launcher
logging.basicConfig(level=logging.INFO)
log = logging.getLogger("launcher")


def submit_all(provider: SimProvider, paths, start):
    """
    Submits every pod found in the manifest files at the same instant.

    Pods are admitted in file order; a bad pod is logged and skipped, and
    so is a manifest file that cannot be read.
    """
    submitted = []
    for path in paths:
        try:
            pods = load_manifests(path)
        except (OSError, ValueError, yaml.YAMLError) as e:
            log.error(f"Failed to load manifests from {path}: {e}")
            continue
        for pod in pods:
            try:
                provider.create_pod(pod, now=start)
                submitted.append(pod)
            except (SimError, ValueError) as e:
                log.error(f"Failed to submit pod {pod.metadata.name!r} from {path}: {e}")
    return submitted


def print_timeline(provider: SimProvider, pods, start, offsets):
    for offset in offsets:
        now = start + timedelta(seconds=offset)
        usage = provider.engine.current_usage(now)
        print(f"=== t+{offset}s: running={usage.running} "
              f"cpu={usage.usage.milli_cpu}m mem={usage.usage.memory_bytes}B gpu={usage.usage.gpu} ===")
        for pod in pods:
            ns, name = pod.metadata.namespace, pod.metadata.name
            status = provider.engine.get_status(build_key(ns, name), now)
            if status is None:
                continue
            line = f"{ns}/{name}: {status.phase.name}"
            if isinstance(status.phase, Running):
                u = status.phase.usage
                line += f" (cpu={u.milli_cpu}m mem={u.memory_bytes}B gpu={u.gpu})"
            print(line)
        print()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Simulated virtual-kubelet node")

    parser.add_argument("manifests", nargs="+", help="Pod manifests (YAML or JSON)")
    parser.add_argument("--config", default=None, help="Provider config file (JSON, per node name)")
    parser.add_argument("--node-name", default="vk-sim", help="Name of the simulated node")
    parser.add_argument(
        "--at",
        type=int,
        nargs="+",
        default=[0],
        help="Offsets in seconds (from submission) at which to print pod phases",
    )

    args = parser.parse_args()

    provider = SimProvider.from_config_file(args.config, args.node_name)
    log.info(f"Node {args.node_name}: capacity {provider.capacity()}")

    with provider:
        start = utc_now()
        pods = submit_all(provider, args.manifests, start)
        usage = provider.node_usage()
        log.info(f"Node usage: {usage.running} running, cpu={usage.usage.milli_cpu}m mem={usage.usage.memory_bytes}B")
        print_timeline(provider, pods, start, sorted(args.at))
